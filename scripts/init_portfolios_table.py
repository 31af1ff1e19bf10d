#!/usr/bin/env python3
"""
Create the portfolios table on the Supabase Postgres instance.
Installs the random slug default and the row-level policies the API relies on.

Usage: DATABASE_URL=postgresql://... python scripts/init_portfolios_table.py
"""
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from core.database import get_engine, init_db

SLUG_DEFAULT_SQL = """
CREATE OR REPLACE FUNCTION public.generate_portfolio_slug() RETURNS text AS $$
DECLARE
  chars text := 'abcdefghijklmnopqrstuvwxyz0123456789';
  candidate text;
BEGIN
  LOOP
    candidate := '';
    FOR i IN 1..8 LOOP
      candidate := candidate || substr(chars, 1 + floor(random() * length(chars))::int, 1);
    END LOOP;
    EXIT WHEN NOT EXISTS (SELECT 1 FROM public.portfolios WHERE slug = candidate);
  END LOOP;
  RETURN candidate;
END;
$$ LANGUAGE plpgsql;

ALTER TABLE public.portfolios ALTER COLUMN slug SET DEFAULT public.generate_portfolio_slug();
"""

POLICIES_SQL = """
ALTER TABLE public.portfolios ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS portfolios_public_read ON public.portfolios;
CREATE POLICY portfolios_public_read ON public.portfolios FOR SELECT USING (true);

DROP POLICY IF EXISTS portfolios_guest_insert ON public.portfolios;
CREATE POLICY portfolios_guest_insert ON public.portfolios FOR INSERT
  WITH CHECK (user_id IS NULL OR user_id = auth.uid()::text);

DROP POLICY IF EXISTS portfolios_owner_update ON public.portfolios;
CREATE POLICY portfolios_owner_update ON public.portfolios FOR UPDATE
  USING (user_id IS NULL OR user_id = auth.uid()::text);

DROP POLICY IF EXISTS portfolios_owner_delete ON public.portfolios;
CREATE POLICY portfolios_owner_delete ON public.portfolios FOR DELETE
  USING (user_id = auth.uid()::text);
"""


def init_portfolios_table() -> bool:
    print("Creating portfolios table...")
    try:
        engine = get_engine()
        init_db(engine)
        with engine.begin() as conn:
            conn.execute(text(SLUG_DEFAULT_SQL))
            conn.execute(text(POLICIES_SQL))
        print("✓ portfolios table, slug default and policies are in place")
        return True
    except Exception as e:
        print(f"✗ Error creating portfolios table: {e}")
        return False


if __name__ == "__main__":
    sys.exit(0 if init_portfolios_table() else 1)
