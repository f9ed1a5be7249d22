# deeptravel/llm.py
import os
import textwrap
from typing import Dict, Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

from deeptravel.config import DEFAULT_OPENAI_MODEL, get_logger
from deeptravel.errors import GenerationFailure
from deeptravel.schemas import Destination

logger = get_logger(__name__)

# Load .env file if present
load_dotenv()

api_key = os.getenv("OPENAI_API_KEY")
if api_key:
    _client: Optional[AsyncOpenAI] = AsyncOpenAI(api_key=api_key)
else:
    _client = None
    logger.warning("OPENAI_API_KEY not set; itinerary generation will use placeholder content")

PREMIUM_SYSTEM_PROMPT = """You are a premium travel expert with deep knowledge of {destination}, {country}.
Create authentic, detailed travel content with the following characteristics:

1. Use specific venue names, addresses, and opening hours where relevant
2. Include approximate costs for activities and dining in local currency with the USD equivalent
3. Note insider tips that typical tourists wouldn't know
4. Consider local transportation options and walking times between locations
5. Provide a balance of popular attractions and authentic local experiences
6. Romanize every non-Latin word or phrase; never use native script characters
7. Format headings with # and ## only, never with asterisks

Your content should read like it was written by someone who lives in {destination}.
"""

ITINERARY_TEMPLATE = """Create a premium 7-day itinerary for {destination}, {country}.

Destination notes:
{notes}

Format the itinerary in Markdown using exactly this structure:

# 7-Day Itinerary for {destination}, {country}

[Introduction: what makes {destination} special, best time to visit]

# Day 1: [Theme of the day]

## Morning Activities
[Specific attraction with exact name, address, opening hours, entrance fee, insider tip]

## Lunch Recommendation
[Specific restaurant with cuisine type, price range and 1-2 signature dishes]

## Afternoon Activities
[Same level of detail as the morning]

## Evening/Dinner Plan
[Specific restaurant or experience, price range, whether reservations are needed]

[Repeat for Days 2-7 using the same headings]

# Practical Information
[Getting around with prices, three hotels (budget, mid-range, luxury), emergency contacts,
5 useful phrases with pronunciation, currency guide]

Include one off-the-beaten-path recommendation per day and practical transportation
instructions between sites.
"""

DAY_TEMPLATE = """Create the plan for Day {day_number} of a premium 7-day itinerary for {destination}, {country}.

Destination notes:
{notes}

Answer with this day only, in Markdown, using exactly these headings:

# Day {day_number}: [Theme of the day]

## Morning Activities

## Lunch Recommendation

## Afternoon Activities

## Evening/Dinner Plan

Use real, specific places with exact names, addresses, prices and one insider tip.
"""


def llm_available() -> bool:
    return _client is not None


def _destination_notes(destination: Destination) -> str:
    """Format the descriptive destination fields for inclusion in the prompt."""
    fields: Dict[str, Optional[str]] = {
        "Overview": destination.immersive_description or destination.description,
        "Best time to visit": destination.best_time_to_visit,
        "Cuisine": destination.cuisine,
        "Culture": destination.culture,
        "Geography": destination.geography,
        "Local tips": destination.local_tips,
    }
    lines = [f"- {label}: {textwrap.shorten(value, 600)}" for label, value in fields.items() if value]
    return "\n".join(lines) if lines else "- (none provided)"


def build_itinerary_prompts(destination: Destination) -> Dict[str, str]:
    return {
        "system": PREMIUM_SYSTEM_PROMPT.format(destination=destination.name, country=destination.country),
        "user": ITINERARY_TEMPLATE.format(
            destination=destination.name,
            country=destination.country,
            notes=_destination_notes(destination),
        ),
    }


def build_day_prompts(destination: Destination, day_number: int) -> Dict[str, str]:
    return {
        "system": PREMIUM_SYSTEM_PROMPT.format(destination=destination.name, country=destination.country),
        "user": DAY_TEMPLATE.format(
            day_number=day_number,
            destination=destination.name,
            country=destination.country,
            notes=_destination_notes(destination),
        ),
    }


async def complete_markdown(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str = DEFAULT_OPENAI_MODEL,
    temperature: float = 0.7,
    max_tokens: int = 4000,
) -> str:
    """Call the OpenAI chat API and return the markdown it produced.

    SDK errors (network, auth, rate limits) propagate unchanged; the caller
    owns retry and timeout policy.
    """
    if _client is None:
        raise GenerationFailure("OpenAI client is not configured (OPENAI_API_KEY missing)")

    logger.info("Invoking LLM model %s (%d prompt chars)", model, len(system_prompt) + len(user_prompt))
    resp = await _client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        temperature=temperature,
        max_tokens=max_tokens,
    )

    content = resp.choices[0].message.content if resp.choices else None
    if not content or not content.strip():
        logger.warning("LLM model %s returned empty content", model)
        raise GenerationFailure("OpenAI returned empty content")
    return content
