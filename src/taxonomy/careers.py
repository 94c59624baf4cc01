# src/taxonomy/careers.py - v1
"""Curated career taxonomy, keyword table and legacy labels.

The keyword table is ordered by priority: the first category with a keyword
contained in the lowercased entity name wins, so narrow categories come
before broad ones ("engineer" is matched last).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pathwise.core.models import CareerRef, CategoryDefinition, CategoryTaxonomy

if TYPE_CHECKING:
    from pathwise.config.settings import Settings

IT = "Information Technology & Digital Careers"
BUSINESS = "Business, Management & Finance"
EDUCATION = "Education & Training"
HEALTHCARE = "Healthcare & Medical Fields"
ENGINEERING = "Engineering & Technical"
TOURISM = "Tourism, Hospitality & Travel"
MEDIA = "Media, Communication & Design"
AGRICULTURE = "Agriculture, Environment & Sustainability"
LAW = "Law, Governance & Public Service"
TRADES = "Skilled Trades & Vocational Paths"
FREELANCE = "Freelance, Remote & Creative Economy"
EMERGING = "Emerging & Future Careers"


def _category(name: str, icon: str, careers: list[tuple[str, str]]) -> CategoryDefinition:
    return CategoryDefinition(
        name=name,
        icon=icon,
        careers=tuple(CareerRef(name=n, slug=s) for n, s in careers),
    )


CATEGORIES: tuple[CategoryDefinition, ...] = (
    _category(IT, "Code", [
        ("Software Engineer / Developer", "software-engineer"),
        ("Web Developer / Mobile App Developer", "web-mobile-developer"),
        ("UI/UX Designer", "ui-ux-designer"),
        ("Data Analyst / Data Scientist", "data-scientist"),
        ("Network Engineer", "network-engineer"),
        ("Cybersecurity Specialist", "cybersecurity-specialist"),
        ("Cloud Engineer / DevOps Engineer", "cloud-devops-engineer"),
        ("IT Project Manager", "it-project-manager"),
        ("Game Developer", "game-developer"),
        ("AI / Machine Learning Engineer", "ai-ml-engineer"),
    ]),
    _category(BUSINESS, "TrendingUp", [
        ("Accountant / Auditor", "accountant"),
        ("Banker / Financial Analyst", "banker-financial-analyst"),
        ("Business Analyst", "business-analyst"),
        ("Marketing Executive / Brand Manager", "marketing-manager"),
        ("HR Manager", "hr-manager"),
        ("Project Coordinator", "project-coordinator"),
        ("Supply Chain Manager", "supply-chain-manager"),
        ("Entrepreneur / Startup Founder", "entrepreneur"),
    ]),
    _category(EDUCATION, "GraduationCap", [
        ("Teacher / Lecturer", "teacher"),
        ("Education Consultant", "education-consultant"),
        ("Curriculum Developer", "curriculum-developer"),
        ("Online Tutor / EdTech Content Creator", "online-tutor"),
        ("School Administrator", "school-administrator"),
    ]),
    _category(HEALTHCARE, "Heart", [
        ("Doctor / Surgeon", "doctor"),
        ("Nurse / Midwife", "nurse"),
        ("Pharmacist", "pharmacist"),
        ("Medical Laboratory Technologist", "medical-lab-technologist"),
        ("Physiotherapist", "physiotherapist"),
        ("Nutritionist / Dietitian", "nutritionist"),
        ("Psychologist / Counselor", "psychologist"),
    ]),
    _category(ENGINEERING, "Cog", [
        ("Civil Engineer", "civil-engineer"),
        ("Mechanical Engineer", "mechanical-engineer"),
        ("Electrical Engineer", "electrical-engineer"),
        ("Electronic & Telecommunication Engineer", "electronic-telecom-engineer"),
        ("Mechatronics / Robotics Engineer", "mechatronics-engineer"),
        ("Quantity Surveyor", "quantity-surveyor"),
        ("Architect", "architect"),
        ("Draughtsman", "draughtsman"),
        ("Technician", "technician"),
    ]),
    _category(TOURISM, "Briefcase", [
        ("Hotel Manager", "hotel-manager"),
        ("Tour Guide", "tour-guide"),
        ("Travel Consultant", "travel-consultant"),
        ("Chef / Culinary Specialist", "chef"),
        ("Event Planner", "event-planner"),
        ("Airline Crew / Aviation Officer", "airline-crew"),
    ]),
    _category(MEDIA, "Megaphone", [
        ("Journalist / News Reporter", "journalist"),
        ("Photographer / Videographer", "photographer-videographer"),
        ("Graphic Designer", "graphic-designer"),
        ("Content Creator / Influencer", "content-creator"),
        ("Social Media Manager", "social-media-manager"),
        ("Film Director / Editor", "film-director-editor"),
        ("Animator / Motion Designer", "animator"),
    ]),
    _category(AGRICULTURE, "Leaf", [
        ("Agricultural Officer", "agricultural-officer"),
        ("Environmental Scientist", "environmental-scientist"),
        ("Forestry / Wildlife Officer", "forestry-wildlife-officer"),
        ("Agribusiness Entrepreneur", "agribusiness-entrepreneur"),
        ("Renewable Energy Specialist", "renewable-energy-specialist"),
    ]),
    _category(LAW, "Scale", [
        ("Lawyer / Attorney-at-law", "lawyer"),
        ("Legal Advisor", "legal-advisor"),
        ("Police Officer", "police-officer"),
        ("Government Officer (Administrative Service, Foreign Service, etc.)", "government-officer"),
        ("Politician / Policy Analyst", "politician-policy-analyst"),
    ]),
    _category(TRADES, "Cog", [
        ("Electrician", "electrician"),
        ("Carpenter", "carpenter"),
        ("Plumber", "plumber"),
        ("Welder / Mechanic", "welder-mechanic"),
        ("Tailor / Fashion Designer", "fashion-designer"),
        ("Beautician / Hairdresser", "beautician"),
        ("Vehicle Technician", "vehicle-technician"),
    ]),
    _category(FREELANCE, "Lightbulb", [
        ("Freelancer (Developer / Designer / Writer)", "freelancer"),
        ("Digital Marketer", "digital-marketer"),
        ("YouTuber / Podcaster", "youtuber-podcaster"),
        ("eCommerce Seller", "ecommerce-seller"),
        ("Virtual Assistant", "virtual-assistant"),
    ]),
    _category(EMERGING, "Target", [
        ("AI Researcher", "ai-researcher"),
        ("Blockchain Developer", "blockchain-developer"),
        ("Renewable Energy Engineer", "renewable-energy-engineer"),
        ("Drone Operator", "drone-operator"),
        ("Cybersecurity Analyst", "cybersecurity-analyst"),
        ("Data Ethics Officer", "data-ethics-officer"),
        ("AR/VR Developer", "ar-vr-developer"),
    ]),
)

KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (EMERGING, ("blockchain", "drone", "quantum", "ar/vr", "virtual reality", "augmented reality", "metaverse")),
    (IT, (
        "software", "developer", "programmer", "data", "cyber", "cloud", "devops",
        "network", "web", "computer", "machine learning", "artificial intelligence",
        "ui/ux", "database", "systems admin",
    )),
    (HEALTHCARE, (
        "doctor", "nurse", "medical", "medicine", "health", "pharma", "therap",
        "dentist", "surgeon", "clinical", "psycholog", "nutrition", "social work",
    )),
    (EDUCATION, ("teacher", "lecturer", "tutor", "education", "training", "instructor", "curriculum", "professor")),
    (LAW, ("lawyer", "legal", "attorney", "police", "government", "policy", "politic", "judge", "diplomat")),
    (TRADES, ("electrician", "carpenter", "plumb", "weld", "mechanic", "tailor", "beautic", "hairdress", "mason")),
    (TOURISM, ("hotel", "tour", "travel", "hospitality", "chef", "culinary", "event", "airline", "pilot", "aviation")),
    (MEDIA, (
        "journalis", "photograph", "video", "graphic", "design", "content", "media",
        "film", "animat", "writer", "editor", "music",
    )),
    (AGRICULTURE, ("agri", "farm", "environment", "forest", "wildlife", "sustainab", "renewable", "marine", "fisher")),
    (FREELANCE, ("freelanc", "remote", "youtube", "podcast", "ecommerce", "e-commerce", "virtual assistant", "influencer")),
    (BUSINESS, (
        "account", "financ", "bank", "business", "marketing", "sales", "human resource",
        "consult", "audit", "invest", "actuar", "supply chain", "entrepreneur", "management", "analyst",
    )),
    (ENGINEERING, ("engineer", "architect", "surveyor", "technician", "draughts", "robotic")),
)

LEGACY_LABELS: frozenset[str] = frozenset({
    "Quiz Generated",
    "Search Generated",
    "Quiz genarated",
    "Other",
})

# Known generated names that neither slug nor name lookup can place.
CATEGORY_VARIATIONS: dict[str, str] = {
    "software engineering": IT,
    "data science": IT,
    "ui/ux design": IT,
    "financial analysis": BUSINESS,
    "investment banking": BUSINESS,
    "quantitative finance": BUSINESS,
    "social worker": HEALTHCARE,
    "actuarial science": BUSINESS,
    "software engineering management": IT,
    "engineering project management": ENGINEERING,
    "it project management": IT,
    "content creation": MEDIA,
    "digital marketing specialist": FREELANCE,
    "business intelligence analyst": BUSINESS,
    "administrative manager": BUSINESS,
    "healthcare administrator": HEALTHCARE,
    "training coordinator": EDUCATION,
    "quantitative analysis": BUSINESS,
    "financial quantitative analyst": BUSINESS,
    "freelance consultant": FREELANCE,
}

DEFAULT_TAXONOMY = CategoryTaxonomy(
    categories=CATEGORIES,
    keywords=KEYWORDS,
    legacy_labels=LEGACY_LABELS,
)


def build_taxonomy(settings: Settings | None = None) -> CategoryTaxonomy:
    """Default taxonomy with the fallback category taken from settings."""
    if settings is None:
        return DEFAULT_TAXONOMY
    return CategoryTaxonomy(
        categories=CATEGORIES,
        keywords=KEYWORDS,
        legacy_labels=LEGACY_LABELS,
        fallback_name=settings.fallback_category,
        fallback_icon=settings.fallback_icon,
    )
