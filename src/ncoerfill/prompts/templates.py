"""
NCOER prompt templates.

Each template is a heading, a list of context-driven sections and a closing
instruction. A section renders only when its context key holds a truthy
value (or the section declares a default), so a template degrades to the
heading and instruction when no prior data is available.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


NCOER_SYSTEM_PROMPT = """You are an expert Army NCOER (Noncommissioned Officer Evaluation Report) writer with deep knowledge of AR 623-3 standards.

Guidelines for NCOER writing:
- Use strong action verbs (led, managed, trained, developed, executed, coordinated)
- Include quantifiable results when possible (numbers, percentages, metrics)
- Be specific to the rated NCO's duties and accomplishments
- Match the professional tone of official Army evaluations
- Focus on impact and results, not just activities
- Use bullet-style format for Part 4 comments
- Stay within character limits appropriate for each block
- Avoid generic phrases; every statement should be specific and meaningful

Do NOT include any preamble or explanation. Output ONLY the evaluation content that would go directly into the form field."""


@dataclass(frozen=True)
class PromptSection:
    """One optional line (or block) of a prompt, driven by a single context key."""
    context_key: str
    label: str
    block: bool = False
    default: Optional[str] = None

    def render(self, context: Mapping[str, str]) -> str:
        value = context.get(self.context_key) or self.default
        if not value:
            return ""
        if self.block:
            return f"{self.label}:\n{value}\n"
        return f"{self.label}: {value}"


@dataclass(frozen=True)
class PromptTemplate:
    key: str
    description: str
    heading: str
    instructions: str
    max_tokens: int
    sections: Tuple[PromptSection, ...] = ()
    system_prompt: str = field(default=NCOER_SYSTEM_PROMPT, repr=False)

    def render(self, context: Mapping[str, str]) -> str:
        """Render the prompt text. Pure: the same context always yields the same text."""
        body = "\n".join(
            line for line in (section.render(context) for section in self.sections) if line
        )
        return "\n\n".join(part for part in (self.heading, body, self.instructions) if part)

    @property
    def context_keys(self) -> Tuple[str, ...]:
        return tuple(section.context_key for section in self.sections)


def _previous(context_key: str, label: str = "Previous comments") -> PromptSection:
    return PromptSection(context_key, label, block=True)


PROMPT_TEMPLATES: Tuple[PromptTemplate, ...] = (
    # Part 3 - Duty Description
    PromptTemplate(
        key="part3_daily_duties",
        description="Part 3c - Daily Duties and Scope",
        heading="Generate content for NCOER Part 3c (Daily Duties and Scope).",
        sections=(
            _previous("previousDuties", "Previous NCOER content for reference"),
            PromptSection("position", "Current position"),
            PromptSection("unit", "Unit"),
            PromptSection("keyDuties", "Key duties to highlight"),
            PromptSection("keyAccomplishments", "Key accomplishments"),
        ),
        instructions=(
            "Write a professional description of daily duties and scope of responsibility. "
            "Include people supervised, equipment/facilities managed, and dollar value "
            "responsibility if applicable. Format as a flowing narrative paragraph."
        ),
        max_tokens=400,
    ),
    PromptTemplate(
        key="part3_special_emphasis",
        description="Part 3d - Areas of Special Emphasis",
        heading="Generate content for NCOER Part 3d (Areas of Special Emphasis).",
        sections=(
            _previous("previousEmphasis", "Previous content"),
            PromptSection("focusAreas", "Focus areas", default="Training, readiness, soldier welfare"),
        ),
        instructions=(
            "Describe areas of special emphasis assigned by the rating chain. These are specific "
            "areas the NCO was directed to focus on during the rating period."
        ),
        max_tokens=300,
    ),
    PromptTemplate(
        key="part3_appointed_duties",
        description="Part 3e - Appointed Duties",
        heading="Generate content for NCOER Part 3e (Appointed Duties).",
        sections=(
            _previous("previousAppointed", "Previous content"),
            PromptSection("additionalDuties", "Additional duties"),
        ),
        instructions=(
            "List appointed duties beyond primary responsibilities. These are additional duties "
            "assigned such as Safety NCO, Unit Movement Officer, Key Control Custodian, etc."
        ),
        max_tokens=250,
    ),
    # Part 4 - Performance Assessment
    PromptTemplate(
        key="part4_pt",
        description="Part 4 - Physical Training Comments",
        heading="Generate NCOER Part 4 Physical Training/ACFT comments.",
        sections=(
            _previous("previousPT"),
            PromptSection("ptScore", "Current ACFT score"),
            PromptSection("ptAchievements", "PT achievements"),
        ),
        instructions=(
            "Write bullet-style comments about physical fitness, ACFT performance, and physical "
            "readiness. Focus on scores, improvement, and leadership of PT programs."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_character",
        description="Part 4c - Character Comments",
        heading="Generate NCOER Part 4c Character comments.",
        sections=(
            _previous("previousCharacter"),
            PromptSection("characterExamples", "Examples"),
        ),
        instructions=(
            "Write bullet-style comments about Army Values, empathy, warrior ethos, and discipline. "
            "Focus on specific examples demonstrating character."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_presence",
        description="Part 4d - Presence Comments",
        heading="Generate NCOER Part 4d Presence comments.",
        sections=(
            _previous("previousPresence"),
            PromptSection("presenceExamples", "Examples"),
        ),
        instructions=(
            "Write bullet-style comments about military bearing, fitness, confidence, and "
            "resilience. Focus on how the NCO presents themselves as a leader."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_intellect",
        description="Part 4e - Intellect Comments",
        heading="Generate NCOER Part 4e Intellect comments.",
        sections=(
            _previous("previousIntellect"),
            PromptSection("intellectExamples", "Examples"),
            PromptSection("education", "Education/training"),
        ),
        instructions=(
            "Write bullet-style comments about mental agility, sound judgment, innovation, and "
            "professional development. Include education and self-improvement efforts."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_leads",
        description="Part 4f - Leads Comments",
        heading="Generate NCOER Part 4f Leads comments.",
        sections=(
            _previous("previousLeads"),
            PromptSection("leadsExamples", "Examples"),
        ),
        instructions=(
            "Write bullet-style comments about leading others, extending influence, building "
            "trust, and creating a positive environment. Focus on leadership actions and their impact."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_develops",
        description="Part 4g - Develops Comments",
        heading="Generate NCOER Part 4g Develops comments.",
        sections=(
            _previous("previousDevelops"),
            PromptSection("developsExamples", "Examples"),
        ),
        instructions=(
            "Write bullet-style comments about developing self and others, creating positive "
            "climate, preparing self, and stewardship of the profession. Focus on mentorship and training."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_achieves",
        description="Part 4h - Achieves Comments",
        heading="Generate NCOER Part 4h Achieves comments.",
        sections=(
            _previous("previousAchieves"),
            PromptSection("achievesExamples", "Examples"),
            PromptSection("keyAccomplishments", "Key accomplishments"),
        ),
        instructions=(
            "Write bullet-style comments about getting results. Focus on specific accomplishments, "
            "mission success, and quantifiable achievements."
        ),
        max_tokens=200,
    ),
    PromptTemplate(
        key="part4_overall",
        description="Part 4j - Overall Performance Comments",
        heading="Generate NCOER Part 4j Overall Performance comments.",
        sections=(
            _previous("previousOverall"),
            PromptSection("overallSummary", "Key points"),
            PromptSection("rating", "Performance rating"),
        ),
        instructions=(
            "Write a comprehensive summary of overall performance. This should tie together the "
            "NCO's achievements across all competencies."
        ),
        max_tokens=300,
    ),
    # Part 5 - Potential
    PromptTemplate(
        key="part5_rater",
        description="Part 5a - Rater Overall Assessment",
        heading="Generate NCOER Part 5a Rater Overall Assessment.",
        sections=(
            _previous("previousRater", "Previous assessment"),
            PromptSection("potentialIndicators", "Potential indicators"),
        ),
        instructions=(
            "Write the rater's assessment of the NCO's potential for increased responsibility. "
            "Focus on readiness for promotion and next-level assignments."
        ),
        max_tokens=250,
    ),
    PromptTemplate(
        key="part5_sr_potential",
        description="Part 5b - Senior Rater Potential Evaluation",
        heading="Generate NCOER Part 5b Senior Rater Potential Evaluation.",
        sections=(
            _previous("previousSR", "Previous evaluation"),
            PromptSection("srPotential", "Potential indicators"),
        ),
        instructions=(
            "Write the senior rater's evaluation of potential. This is the most influential block "
            "for promotion boards."
        ),
        max_tokens=250,
    ),
    PromptTemplate(
        key="part5_sr_comments",
        description="Part 5c - Senior Rater Comments",
        heading="Generate NCOER Part 5c Senior Rater Comments.",
        sections=(
            _previous("previousSRComments"),
            PromptSection("srComments", "Key points"),
        ),
        instructions=(
            "Write the senior rater's comments about potential. Include recommendations for future "
            "assignments, schools, and broadening opportunities."
        ),
        max_tokens=300,
    ),
)
