"""Fixed survey content: CRediT roles, the icon set and the tie-breaker candidates."""
import random
from typing import Literal
from pydantic import BaseModel, Field

AGE_RANGES = ("18-25", "26-35", "36-45", "46-55", "56-65", "66+")
RETURNING = "Returning"

IconShape = Literal[
    "circle", "square", "triangle", "diamond", "hexagon", "star", "heart",
    "lightbulb", "gear", "chart", "pen", "eye", "users", "search",
]


class CreditRole(BaseModel):
    id: int
    title: str
    description: str


class IconItem(BaseModel):
    id: str
    name: str
    color: str
    shape: IconShape


class TieBreakerRole(BaseModel):
    title: str
    description: str
    candidates: list[str] = Field(min_length=4, max_length=4)


class ContributorExample(BaseModel):
    role: str
    contributors: list[str]


CREDIT_ROLES: list[CreditRole] = [
    CreditRole(id=1, title="Conceptualization",
               description="Ideas; formulation or evolution of overarching research goals and aims."),
    CreditRole(id=2, title="Data Curation",
               description="Management activities to annotate, scrub and maintain research data for initial use and later re-use."),
    CreditRole(id=3, title="Formal Analysis",
               description="Application of statistical, mathematical, computational, or other formal techniques to analyze or synthesize study data."),
    CreditRole(id=4, title="Funding Acquisition",
               description="Acquisition of the financial support for the project leading to this publication."),
    CreditRole(id=5, title="Investigation",
               description="Conducting a research and investigation process, specifically performing the experiments, or data/evidence collection."),
    CreditRole(id=6, title="Methodology",
               description="Development or design of methodology; creation of models."),
    CreditRole(id=7, title="Project Administration",
               description="Management and coordination responsibility for the research activity planning and execution."),
    CreditRole(id=8, title="Resources",
               description="Provision of study materials, reagents, materials, patients, laboratory samples, animals, instrumentation, computing resources, or other analysis tools."),
    CreditRole(id=9, title="Software",
               description="Programming, software development; designing computer programs; implementation of the computer code and supporting algorithms."),
    CreditRole(id=10, title="Supervision",
               description="Oversight and leadership responsibility for the research activity planning and execution, including mentorship."),
    CreditRole(id=11, title="Validation",
               description="Verification of the overall replication/reproducibility of results/experiments and other research outputs."),
    CreditRole(id=12, title="Visualization",
               description="Preparation, creation and/or presentation of the published work, specifically visualization/data presentation."),
    CreditRole(id=13, title="Writing – Original Draft",
               description="Preparation, creation and/or presentation of the published work, specifically writing the initial draft."),
    CreditRole(id=14, title="Writing – Review & Editing",
               description="Critical review, commentary or revision of the published work, including pre- or post-publication stages."),
]

ICON_SET: list[IconItem] = [
    IconItem(id="icon-1", name="lightbulb", color="#F59E0B", shape="lightbulb"),
    IconItem(id="icon-2", name="database", color="#3B82F6", shape="hexagon"),
    IconItem(id="icon-3", name="magnifying-glass", color="#10B981", shape="search"),
    IconItem(id="icon-4", name="dollar-sign", color="#22C55E", shape="circle"),
    IconItem(id="icon-5", name="microscope", color="#8B5CF6", shape="triangle"),
    IconItem(id="icon-6", name="network", color="#06B6D4", shape="diamond"),
    IconItem(id="icon-7", name="person", color="#EC4899", shape="users"),
    IconItem(id="icon-8", name="box", color="#A16207", shape="square"),
    IconItem(id="icon-9", name="code", color="#0EA5E9", shape="gear"),
    IconItem(id="icon-10", name="eye", color="#6366F1", shape="eye"),
    IconItem(id="icon-11", name="clipboard", color="#14B8A6", shape="star"),
    IconItem(id="icon-12", name="chart", color="#EF4444", shape="chart"),
    IconItem(id="icon-13", name="pen", color="#64748B", shape="pen"),
    IconItem(id="icon-14", name="pen-caret", color="#F97316", shape="heart"),
]

TIE_BREAKER_ROLES: list[TieBreakerRole] = [
    TieBreakerRole(
        title="Investigation",
        description="Conducting the research and investigation process, performing experiments, or collecting data.",
        candidates=["microscope", "flask", "search", "clipboard-list"],
    ),
    TieBreakerRole(
        title="Formal Analysis",
        description="Application of statistical, mathematical, or other formal techniques to analyze or synthesize study data.",
        candidates=["chart", "calculator", "sigma", "binary"],
    ),
    TieBreakerRole(
        title="Writing – Original Draft",
        description="Writing the initial draft of the published work.",
        candidates=["pen-tool", "file-text", "keyboard", "scroll"],
    ),
    TieBreakerRole(
        title="Writing – Review & Editing",
        description="Critical review, commentary, or revision of the work.",
        candidates=["file-check", "eye", "highlighter", "comments"],
    ),
    TieBreakerRole(
        title="Supervision",
        description="Oversight and leadership for the research activity, including mentorship.",
        candidates=["users", "crown", "grad-cap", "user-check"],
    ),
    TieBreakerRole(
        title="Project Administration",
        description="Management and coordination of the research activity planning and execution.",
        candidates=["briefcase", "calendar", "kanban", "clipboard"],
    ),
    TieBreakerRole(
        title="Methodology",
        description="Development or design of methodology; creation of models.",
        candidates=["map", "compass", "ruler", "network"],
    ),
]

MAX_RANKED_ICONS = 4

_EXAMPLE_ROWS = [
    ("Conceptualization",
     "Mike Morrison, Michael Lai, Acorn Steed, Adithya Mana, Barry Prendergast, Brian Blais, "
     "Celso Júnior, David Green, Divya Koppikar, Jay Patel, Lloyd Gwishiri, Nafisa Mohamed, "
     "Philipp Koellinger, Rieke Schäfer, Rowan Cockett, Ryan Molen, Samir Mamdouh, Steve Purves, "
     "Swetha Ramaswamy, Thurstan Hethorn"),
    ("Data curation", "Michael Lai, Rieke Schäfer"),
    ("Formal analysis", "Michael Lai, Rieke Schäfer"),
    ("Funding acquisition", "N/A"),
    ("Investigation", "Mike Morrison, Michael Lai, Rieke Schäfer"),
    ("Methodology", "Mike Morrison, Michael Lai, Swetha Ramaswamy, Rieke Schäfer, Thurstan"),
    ("Project administration", "Michael Lai"),
    ("Resources", ""),
    ("Software", "Adithya Mana"),
    ("Supervision", ""),
    ("Validation", ""),
    ("Visualization", ""),
    ("Writing – original draft", ""),
    ("Writing – review & editing", ""),
]


def role_by_title(title: str) -> CreditRole | None:
    """Case-insensitive lookup, so 'Data curation' finds 'Data Curation'."""
    wanted = title.strip().casefold()
    return next((r for r in CREDIT_ROLES if r.title.casefold() == wanted), None)


def icon_by_name(name: str, icons: list[IconItem] = ICON_SET) -> IconItem | None:
    return next((i for i in icons if i.name == name), None)


def icon_shape(name: str) -> str:
    icon = icon_by_name(name)
    return icon.shape if icon else "circle"


def tie_breaker_role(title: str) -> TieBreakerRole | None:
    return next((r for r in TIE_BREAKER_ROLES if r.title == title), None)


def shuffled_icons(icons: list[IconItem] = ICON_SET, rng: random.Random | None = None) -> list[IconItem]:
    pool = [icon.model_copy() for icon in icons]
    (rng or random).shuffle(pool)
    return pool


def contributor_example() -> list[ContributorExample]:
    rows = []
    for role, names in _EXAMPLE_ROWS:
        matched = role_by_title(role)
        rows.append(ContributorExample(
            role=matched.title if matched else role,
            contributors=[n.strip() for n in names.split(",") if n.strip()],
        ))
    return rows
