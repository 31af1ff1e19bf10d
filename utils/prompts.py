"""
Prompt templates for chat, extraction, generation and editing
"""
import json
from typing import Any, Dict, List, Optional

CHAT_SYSTEM = "You are a helpful AI assistant for portfolio generation."
EXTRACT_SYSTEM = "You are a data extraction expert. Return only JSON."
DESIGNER_SYSTEM = "You are an expert web designer and developer. Create stunning portfolios."
LEGACY_SYSTEM = "You are a professional portfolio website generator."

DEFAULT_DESIGN_PROMPT = "Modern and elegant design"
NOT_SPECIFIED = "Not specified"

_PROFILE_IMAGES = {
    "مطور": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=400&fit=crop&crop=face",
    "مصمم": "https://images.unsplash.com/photo-1494790108755-2616b612b786?w=400&h=400&fit=crop&crop=face",
    "مهندس": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=400&h=400&fit=crop&crop=face",
    "مدير": "https://images.unsplash.com/photo-1500648767791-00dcc994a43e?w=400&h=400&fit=crop&crop=face",
    "developer": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=400&fit=crop&crop=face",
    "designer": "https://images.unsplash.com/photo-1494790108755-2616b612b786?w=400&h=400&fit=crop&crop=face",
    "engineer": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=400&h=400&fit=crop&crop=face",
    "manager": "https://images.unsplash.com/photo-1500648767791-00dcc994a43e?w=400&h=400&fit=crop&crop=face",
}
_DEFAULT_PROFILE_IMAGE = "https://images.unsplash.com/photo-1535713875002-d1d0cf377fde?w=400&h=400&fit=crop&crop=face"

# Keyword order matters: first keyword contained in the project name wins
_PROJECT_IMAGES = [
    ("موقع", "https://images.unsplash.com/photo-1460925895917-afdab827c52f?w=600&h=400&fit=crop"),
    ("تطبيق", "https://images.unsplash.com/photo-1512941937669-90a1b58e7e9c?w=600&h=400&fit=crop"),
    ("نظام", "https://images.unsplash.com/photo-1551288049-bebda4e38f71?w=600&h=400&fit=crop"),
    ("منصة", "https://images.unsplash.com/photo-1551650975-87deedd944c3?w=600&h=400&fit=crop"),
    ("website", "https://images.unsplash.com/photo-1460925895917-afdab827c52f?w=600&h=400&fit=crop"),
    ("app", "https://images.unsplash.com/photo-1512941937669-90a1b58e7e9c?w=600&h=400&fit=crop"),
    ("system", "https://images.unsplash.com/photo-1551288049-bebda4e38f71?w=600&h=400&fit=crop"),
    ("platform", "https://images.unsplash.com/photo-1551650975-87deedd944c3?w=600&h=400&fit=crop"),
]
_DEFAULT_PROJECT_IMAGE = "https://images.unsplash.com/photo-1555066931-4365d14bab8c?w=600&h=400&fit=crop"


def default_profile_image(profession: Optional[str]) -> str:
    return _PROFILE_IMAGES.get((profession or "").strip(), _DEFAULT_PROFILE_IMAGE)


def default_project_image(project_name: Optional[str]) -> str:
    name = (project_name or "").lower()
    for keyword, url in _PROJECT_IMAGES:
        if keyword in name:
            return url
    return _DEFAULT_PROJECT_IMAGE


def with_project_images(projects: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    out = []
    for project in projects or []:
        if not isinstance(project, dict):
            continue
        item = dict(project)
        if not item.get("imageUrl"):
            item["imageUrl"] = default_project_image(item.get("name"))
        out.append(item)
    return out


def extract_prompt(text: str) -> str:
    return f"""
استخرج البيانات التالية من النص المعطى وأعدها في صيغة JSON:

النص: {text}

المطلوب استخراجه:
- name: الاسم الكامل
- profession: المهنة أو التخصص
- bio: نبذة شخصية
- skills: قائمة المهارات (array)
- projects: قائمة المشاريع مع الأسماء والأوصاف والروابط (array)
- github: رابط GitHub
- linkedin: رابط LinkedIn
- twitter: رابط Twitter
- instagram: رابط Instagram
- email: البريد الإلكتروني
- phone: رقم الهاتف
- additionalLinks: روابط إضافية (array of objects with name and url)

أعد فقط JSON بدون أي شرح أو تعليقات."""


def portfolio_prompt(data: Dict[str, Any]) -> str:
    def field(key: str) -> str:
        return data.get(key) or NOT_SPECIFIED

    skills = data.get("skills")
    skills_text = ", ".join(str(s) for s in skills) if isinstance(skills, list) and skills else NOT_SPECIFIED
    profile_image = data.get("profileImageUrl") or default_profile_image(data.get("profession"))
    projects = with_project_images(data.get("projects"))
    design = data.get("designPrompt") or DEFAULT_DESIGN_PROMPT

    return f"""Create a complete, single-file HTML portfolio website using the following data.
Include all CSS (in <style> tags) and JavaScript (in <script> tags) internally.

Personal Information:
- Name: {field("name")}
- Profession: {field("profession")}
- Bio: {field("bio")}
- Skills: {skills_text}
- Email: {field("email")}
- Phone: {field("phone")}
- GitHub: {field("github")}
- LinkedIn: {field("linkedin")}
- Twitter: {field("twitter")}
- Instagram: {field("instagram")}
- Profile Image: {profile_image}
- Projects: {json.dumps(projects, ensure_ascii=False)}
- Additional Links: {json.dumps(data.get("additionalLinks") or [], ensure_ascii=False)}

Design Requirements:
{design}

Focus on a high-end, premium aesthetic with smooth animations, modern typography (Inter/Outfit), and a responsive layout.
Return ONLY the complete HTML code starting with <!DOCTYPE html>."""


EDIT_SYSTEM = """
You are an expert web developer.
Your ONLY responsibility is to apply precise modifications to existing HTML/CSS/JS code exactly as the user requests, nothing more.

1. Document Structure Integrity

You MUST NOT:
- Add or duplicate <!DOCTYPE html>
- Add or duplicate <html>, <head>, or <body>
- Create or embed a new HTML document inside the existing one
- Regenerate the entire layout unless explicitly instructed

There must remain exactly ONE HTML document structure with ONE <html>, <head>, and <body> block.

2. Surgical Editing Discipline

You MUST:
- Read the entire code before editing anything
- Only modify the SPECIFIC part the user requests
- Keep ALL other code 100% unchanged
- Avoid introducing new classes, IDs, or elements unless explicitly asked
- Avoid modifying JavaScript logic unless the request explicitly says so

3. Full File Output

You MUST output the entire HTML file from <!DOCTYPE html> to </html>, with all
<head>, <style>, <body>, and <script> included. No placeholders, no ellipses,
no omissions, no markdown, no explanations.

4. Code Consistency

Preserve existing responsive design, keep valid HTML5 syntax and do not break JavaScript behavior.

5. Output Format

Start the output exactly with <!DOCTYPE html> and end exactly with </html>.
"""


def edit_prompt(html: str, request: str) -> str:
    return f"""
Here is the COMPLETE current HTML code:

{html}

---

User's modification request: {request}

---

Instructions:
1. Read the ENTIRE code above carefully
2. Find the specific part that needs to be changed based on the user's request
3. Make ONLY that change
4. Return the COMPLETE modified HTML (all of it, from <!DOCTYPE to </html>)
5. Ensure there is NO duplication of the HTML structure
"""


def enhance_prompt(html: str, design_prompt: Optional[str]) -> str:
    return f"""
تحسين وتحليل الكود التالي لموقع البورتوفوليو:

الكود الحالي:
{html}

متطلبات التصميم:
{design_prompt or 'تحسين عام للتصميم'}

المطلوب:
1. تحليل الكود الحالي وتحديد نقاط التحسين
2. تحسين التصميم البصري والألوان
3. إضافة تأثيرات hover وانيميشن لطيفة
4. تحسين التخطيط والمساحات البيضاء
5. تحسين الخطوط والتباين
6. تحسين الاستجابة للأجهزة المختلفة

أعد فقط الكود HTML المحسن بدون أي شرح أو تعليقات."""


def legacy_prompt(description: Optional[str]) -> str:
    return f"""
أنت مولد مواقع بورتوفوليو احترافي. مهمتك إنشاء موقع بورتوفوليو كامل ومتجاوب باستخدام HTML و CSS و JavaScript.

المعلومات المطلوبة:
{description or "مطور ويب بخبرة 5 سنوات"}

المطلوب:
1. إنشاء موقع بورتوفوليو احترافي ومتجاوب
2. أقسام الموقع: Hero, About, Skills, Projects, Contact
3. استخدام CSS Grid و Flexbox للتصميم المتجاوب
4. إضافة تأثيرات hover وانيميشن خفيفة
5. استخدام خطوط Google Fonts

أعد فقط الكود HTML الكامل مع CSS و JavaScript مدمج، بدون أي شرح أو تعليقات."""
