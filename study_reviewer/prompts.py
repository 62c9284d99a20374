"""Prompt templates for question generation."""
from __future__ import annotations

SYSTEM_PROMPT = """\
You are an expert quiz maker helping a student prepare for a {subject}.

CRITICAL REQUIREMENTS FOR ACCURACY:
- ONLY create questions that can be DIRECTLY answered from the provided study material
- NEVER make up facts or information not in the source content
- The correct answer MUST be explicitly stated or directly implied in the source material
- Include the exact quote or reference from the source in your explanation
- Avoid trick questions; be clear and straightforward
- All distractors (wrong answers) should be plausible but clearly incorrect based on the source

Always respond with valid JSON only, no markdown or extra text."""

BASE_INSTRUCTION = """\
You are creating questions for a {subject} review.

STUDY MATERIAL TO BASE QUESTIONS ON:
\"\"\"
{content}
\"\"\"

CRITICAL ACCURACY REQUIREMENTS:
1. ONLY ask about information EXPLICITLY stated in the study material above
2. The correct answer MUST be found word-for-word or directly stated in the source
3. In your explanation, QUOTE the exact part of the study material that contains the answer
4. Do NOT add external knowledge; stick strictly to the provided content
5. Make questions that test the most important concepts

Return ONLY a valid JSON array. No markdown, no code fences, no text before or after the array."""

MULTIPLE_CHOICE_PROMPT = """\
Generate {count} MULTIPLE CHOICE questions.

Requirements:
- Exactly 4 answer options, exactly ONE of them correct
- "correct_answer" must be copied exactly from one of the options
- Wrong options should be plausible but clearly incorrect based on the source
- Include the SOURCE QUOTE in the explanation

Return JSON array:
[
  {{
    "type": "multiple_choice",
    "question_text": "According to the study material, what is...?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correct_answer": "Option A",
    "explanation": "The correct answer is Option A. The study material states: '[exact quote from source]'."
  }}
]"""

IDENTIFICATION_PROMPT = """\
Generate {count} IDENTIFICATION questions. These test recall of specific terms and definitions.

Requirements:
- No options; the student types the answer
- "correct_answer" is a short, exact term, name or concept taken from the source
- Include the SOURCE QUOTE in the explanation

Return JSON array:
[
  {{
    "type": "identification",
    "question_text": "According to the study material, _____ is defined as the process of...",
    "correct_answer": "exact term from source",
    "explanation": "The answer is 'exact term'. The study material states: '[exact quote from source]'."
  }}
]"""

TRUE_FALSE_PROMPT = """\
Generate {count} TRUE OR FALSE questions.

Requirements:
- Statements must be clearly true OR false based on the source (no ambiguity)
- For FALSE statements, change ONE key detail from the source
- "options" is always ["True", "False"] and "correct_answer" is exactly one of them
- Include the SOURCE QUOTE in the explanation to prove the answer

Return JSON array:
[
  {{
    "type": "true_false",
    "question_text": "According to the study material, [statement].",
    "options": ["True", "False"],
    "correct_answer": "True",
    "explanation": "This is TRUE. The study material states: '[exact quote from source]'."
  }}
]"""

MIXED_PROMPT = """\
Generate a MIX of question types, {total} questions in total:
- {multiple_choice} MULTIPLE CHOICE questions
- {identification} IDENTIFICATION questions
- {true_false} TRUE OR FALSE questions

Every object MUST carry a "type" field naming its question type.

MULTIPLE CHOICE rules: exactly 4 options, exactly one correct; "correct_answer" copied exactly from the options.
IDENTIFICATION rules: no options; "correct_answer" is a short exact term from the source.
TRUE OR FALSE rules: "options" is always ["True", "False"]; "correct_answer" is exactly one of them.
Include the SOURCE QUOTE in every explanation.

Return ONE JSON array containing all questions:
[
  {{
    "type": "multiple_choice",
    "question_text": "Question text...",
    "options": ["A", "B", "C", "D"],
    "correct_answer": "A",
    "explanation": "Correct because: '[quote from source]'..."
  }},
  {{
    "type": "identification",
    "question_text": "Fill in: _____...",
    "correct_answer": "term",
    "explanation": "The term is found in: '[quote from source]'..."
  }},
  {{
    "type": "true_false",
    "question_text": "Statement...",
    "options": ["True", "False"],
    "correct_answer": "True",
    "explanation": "True because: '[quote from source]'..."
  }}
]"""

TYPE_PROMPTS = {
    "multiple_choice": MULTIPLE_CHOICE_PROMPT,
    "identification": IDENTIFICATION_PROMPT,
    "true_false": TRUE_FALSE_PROMPT,
}


def format_mixed_counts(counts: dict[str, int]) -> str:
    return MIXED_PROMPT.format(total=sum(counts.values()), **counts)
