"""
Prompt construction for the LLM verdict evaluator.

Only the text is built here; submitting it to a model happens in the
integration layer. The JSON schema requested in the user prompt is the one
verdictq.scoring.llm_response validates.
"""

from __future__ import annotations

from verdictq.scoring.types import PurchaseInput

SYSTEM_PROMPT = """Role: You are a purchase evaluator. Your responsibility is to score purchase motivations and long-term utility against the user's values and history.

User values are rated 1-5, where higher scores indicate stronger importance:
- Durability: "I value things that last several years."
- Efficiency: "I value tools that save time for me."
- Aesthetics: "I value items that fit my existing environment's visual language."
- Interpersonal Value: "I value purchases that facilitate shared experiences."
- Emotional Value: "I value purchases that provide meaningful emotional benefits."

You must respond with valid JSON only, no other text."""

USER_PROMPT_TEMPLATE = """{user_values}

{similar_purchases}

{recent_purchases}

Now evaluate this purchase:
- Item: {title}
- Price: {price}
- Category: {category}
- Vendor: {vendor}
- User rationale: "{justification}"
- Important purchase: {important}

Output the final verdict and scoring in this exact JSON format:
{{
  "value_conflict": {{
    "score": <number 0-1>,
    "explanation": "<brief explanation>"
  }},
  "emotional_impulse": {{
    "score": <number 0-1>,
    "explanation": "<brief explanation>"
  }},
  "long_term_utility": {{
    "score": <number 0-1>,
    "explanation": "<brief explanation>"
  }},
  "emotional_support": {{
    "score": <number 0-1>,
    "explanation": "<brief explanation>"
  }},
  "rationale": "<2-3 sentence rationale>"
}}"""


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def build_user_prompt(
    purchase: PurchaseInput,
    user_values: str,
    similar_purchases: str,
    recent_purchases: str,
) -> str:
    """
    Build the per-purchase prompt.

    Args:
        purchase: The purchase being evaluated
        user_values: Output of context.format_user_values
        similar_purchases: Output of context.format_similar_purchases
        recent_purchases: Output of context.format_recent_purchases
    """
    return USER_PROMPT_TEMPLATE.format(
        user_values=user_values,
        similar_purchases=similar_purchases,
        recent_purchases=recent_purchases,
        title=purchase.title,
        price=f"${purchase.price:.2f}" if purchase.price is not None else "Not specified",
        category=purchase.category or "Uncategorized",
        vendor=purchase.vendor or "Not specified",
        justification=purchase.justification or "No rationale provided",
        important="Yes" if purchase.is_important else "No",
    )
