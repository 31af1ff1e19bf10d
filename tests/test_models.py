import pytest
from sqlalchemy.orm import sessionmaker

from core.database import get_engine, init_db
from models.portfolio import Portfolio, slug_error


@pytest.fixture
def session():
    engine = get_engine("sqlite://")
    init_db(engine)
    Session = sessionmaker(bind=engine)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


def test_portfolio_round_trip(session):
    session.add(Portfolio(slug="my-site", html="<html></html>", user_id="u1"))
    session.commit()

    row = session.query(Portfolio).filter(Portfolio.slug == "my-site").first()
    data = row.to_dict()
    assert data["html"] == "<html></html>"
    assert data["user_id"] == "u1"
    assert data["created_at"] is not None
    assert "html" not in row.to_dict(include_html=False)


@pytest.mark.parametrize("slug,expected", [
    ("my-site-2", ""),
    ("abc", ""),
    ("", "New slug is required"),
    (None, "New slug is required"),
    ("My Site", "Invalid slug format. Use only lowercase letters, numbers, and hyphens."),
    ("ab", "Slug must be between 3 and 50 characters"),
    ("a" * 51, "Slug must be between 3 and 50 characters"),
])
def test_slug_error(slug, expected):
    assert slug_error(slug) == expected
