"""
Prompts and response schema for the generation service.

The base instruction asks for all six formats; each named profile adds
its own focus. The response schema mirrors the content model's required
fields so the generator is steered toward a conforming payload.
"""
from __future__ import annotations

from reformat.core.profiles import ProfileType

# =============================================================================
# System Instruction
# =============================================================================

BASE_INSTRUCTION = """You are an expert special education assistant.
Your goal is to restructure learning material into a multimodal JSON format optimized for: {profile}.

**GLOBAL REQUIREMENT**:
1. All explanations must be at a clear, accessible **High School Level**.
2. Use Markdown heavily. Use **bold** for emphasis.
3. For Math: Use LaTeX format enclosed in single dollar signs (e.g. $x^2 + 5$) for inline math.

You must generate 6 distinct formats:
1. **Blocks (Immersive Reader)**: This is the main content. Extract ALL details. Break long texts into chunks. Use 'math' blocks for step-by-step problems.
2. **Slides**: Visual slideshow. Max 30 words per slide.
3. **AudioScript**: Podcast-style script (3-5 mins).
4. **Activities**: Interactive quizzes.
   - You **MUST** generate strictly **Multiple Choice Quizzes** (3-5 questions).
   - You **MUST** provide 'options', 'correctAnswer' (exact text string from options), and 'correctAnswerIndex' (0-based integer). Ensure there is exactly one correct answer.
5. **Mindmap**: A hierarchical breakdown.
6. **Flashcards**: Key terms only (front) and simple definitions (back).
"""

PROFILE_FOCUS: dict[ProfileType, str] = {
    ProfileType.DYSLEXIA: """Focus on: Short sentences, visual vocabulary aids.
In 'blocks', bold key terms within the text.
Slides should have minimal text and strong visual cues.
Mindmap should be visual and simple. Mnemonics should use rhyme or imagery.""",
    ProfileType.DYSCALCULIA: """Focus on: Breaking down math into granular steps.
In 'blocks', use specific 'math' type blocks for any numbers or formulas.
Slides should visualize the logic (e.g., number lines).
Mindmap should show process flow for solving problems.""",
    ProfileType.ADHD: """Focus on: "Micro-learning" chunks.
In 'blocks', keep text blocks short (max 2-3 sentences) and use 'checkpoint' blocks frequently to check understanding.
Audio script should be energetic and concise.
Flashcards are crucial for active recall.""",
    ProfileType.ELL: """Focus on: Plain English, explaining idioms.
In 'blocks', provide definitions for complex words using 'vocabulary' blocks.
Mnemonics should help link English terms to concepts.""",
    ProfileType.AUTISM: """Focus on: Literal language, logical structure.
In 'blocks', use very clear, logical headings. Avoid metaphors.
Mindmap should be very structured and logical.""",
}


def get_system_instruction(profile: ProfileType) -> str:
    """Base instruction plus the profile's focus (custom has none)."""
    profile = ProfileType(profile)
    base = BASE_INSTRUCTION.format(profile=profile.value)
    return f"{base}\n{PROFILE_FOCUS.get(profile, '')}"


def inline_request_text(profile: ProfileType) -> str:
    return f"Analyze and restructure for {ProfileType(profile).value}. Output JSON."


def text_request_text(content: str, profile: ProfileType) -> str:
    return f"Analyze content (base64 decoded): {content} for {ProfileType(profile).value}. Output JSON."


# =============================================================================
# Conversation / Feedback
# =============================================================================

TUTOR_INSTRUCTION = """You are a friendly tutor helping a student with {profile} understand a topic.
Topic Context: {title} - {script}.
Encourage the student to explain the topic in their own words.
If they are wrong, gently guide them. If right, praise them."""

FEEDBACK_REQUEST = (
    "The student ({profile}) is explaining this topic. Be encouraging and clarify "
    "any misconceptions. Context: {context}"
)

EXPLAIN_GREETING = (
    'Hi! I\'d love to hear what you learned about "{title}". '
    "Can you explain it to me in your own words?"
)


# =============================================================================
# Response Schema
# =============================================================================

def _string(description: str | None = None) -> dict:
    schema = {"type": "STRING"}
    if description:
        schema["description"] = description
    return schema


RESPONSE_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "title": _string("A clear, descriptive title"),
        "blocks": {
            "type": "ARRAY",
            "description": "Full-length detailed content split into blocks for reading.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _string(),
                    "type": {
                        "type": "STRING",
                        "enum": ["text", "heading", "math", "vocabulary", "checkpoint", "summary"],
                    },
                    "content": _string("Markdown supported (include math in $...$). For 'text', keep original detail."),
                    "visualAid": _string("Emoji or icon"),
                    "simplification": _string(),
                    "highlight": _string(),
                    "steps": {"type": "ARRAY", "items": _string()},
                },
                "required": ["id", "type", "content"],
            },
        },
        "slides": {
            "type": "ARRAY",
            "description": "Visual slides for 'Watch' mode",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _string(),
                    "content": _string("Concise text for the slide (High school level)"),
                    "visualCue": _string("Emoji or scene description"),
                    "speakerNotes": _string("Narration script for this slide"),
                },
                "required": ["id", "content", "visualCue", "speakerNotes"],
            },
        },
        "audioScript": _string("A complete, engaging podcast-style script summarizing the topic."),
        "activities": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _string(),
                    "type": {"type": "STRING", "enum": ["quiz"]},
                    "question": _string(),
                    "options": {"type": "ARRAY", "items": _string()},
                    "correctAnswer": _string("The EXACT text of the correct option."),
                    "correctAnswerIndex": {
                        "type": "INTEGER",
                        "description": "The 0-based index of the correct option.",
                    },
                },
                "required": ["id", "type", "question", "options", "correctAnswer", "correctAnswerIndex"],
            },
        },
        "mindmap": {
            "type": "ARRAY",
            "description": "Flat list of nodes representing a tree structure",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _string(),
                    "parentId": _string("ID of the parent node. Empty or null for root."),
                    "label": _string("Short label for the node"),
                    "description": _string("Definition or detail shown on expand."),
                },
                "required": ["id", "label"],
            },
        },
        "flashcards": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _string(),
                    "front": _string("The single Key Term or Concept Name (No dates unless it is the name)"),
                    "back": _string("The definition or explanation"),
                    "mnemonic": _string("A memory aid (rhyme, acronym, image association)"),
                },
                "required": ["id", "front", "back"],
            },
        },
    },
    "required": ["title", "blocks", "slides", "audioScript", "activities", "mindmap", "flashcards"],
}
