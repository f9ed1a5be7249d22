from __future__ import annotations

import os
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from openai import OpenAIError

from deeptravel.errors import GenerationFailure, InvalidDayNumber, UnknownGeneratorType
from deeptravel.generators.factory import ItineraryGeneratorFactory, get_generator_factory
from deeptravel.pipeline import (
    analyze_content,
    build_sample_itinerary,
    generate_day_content,
    generate_structured_itinerary,
)
from deeptravel.schemas import (
    ContentRequest,
    ExtractionReport,
    GenerateDayRequest,
    GenerateItineraryRequest,
    ItineraryReport,
    SampleExtractionRequest,
)
from deeptravel.tools.extraction import section_body
from deeptravel.tools.headings import SECTION_KEYS
from deeptravel.tools.normalizer import normalize_content

app = FastAPI(title="Deep Travel Itinerary API")

# Local UIs (the marketing site dev server, the PDF preview tool) call this API
# directly. Operators can narrow it via DEEPTRAVEL_ALLOWED_ORIGINS.
raw_origins = os.getenv("DEEPTRAVEL_ALLOWED_ORIGINS") or "*"
allowed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
if not allowed_origins:
    allowed_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _generation_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (InvalidDayNumber, UnknownGeneratorType)):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=502, detail=f"Itinerary generation failed: {exc}")


@app.post("/api/itineraries/generate", response_model=ItineraryReport)
async def api_generate_itinerary(
    request: GenerateItineraryRequest,
    factory: ItineraryGeneratorFactory = Depends(get_generator_factory),
) -> ItineraryReport:
    """Generate a full itinerary, then normalize and extract it."""
    try:
        return await generate_structured_itinerary(request.destination, request.generator_type, factory)
    except (InvalidDayNumber, UnknownGeneratorType, GenerationFailure, OpenAIError) as exc:
        raise _generation_error(exc) from exc


@app.post("/api/itineraries/day")
async def api_generate_day(
    request: GenerateDayRequest,
    factory: ItineraryGeneratorFactory = Depends(get_generator_factory),
) -> Dict[str, Any]:
    try:
        day = await generate_day_content(request.destination, request.day_number, request.generator_type, factory)
    except (InvalidDayNumber, UnknownGeneratorType, GenerationFailure, OpenAIError) as exc:
        raise _generation_error(exc) from exc

    return {
        **day.summary().model_dump(),
        "content": day.raw_block,
        "section_text": {key: section_body(getattr(day.sections, key)) or None for key in SECTION_KEYS},
    }


@app.post("/api/content/normalize")
async def api_normalize(request: ContentRequest) -> Dict[str, Any]:
    content = normalize_content(request.content)
    return {"content": content, "length": len(content)}


@app.post("/api/content/extract", response_model=ExtractionReport)
async def api_extract(request: ContentRequest) -> ExtractionReport:
    return analyze_content(request.content, normalize=request.normalize)


@app.post("/api/patterns/test-extraction", response_model=ExtractionReport)
async def api_test_extraction(request: SampleExtractionRequest) -> ExtractionReport:
    """Run extraction over a known-good sample for the destination."""
    return analyze_content(build_sample_itinerary(request.destination))


@app.get("/api/generators")
async def api_generators(factory: ItineraryGeneratorFactory = Depends(get_generator_factory)) -> Dict[str, Any]:
    return {
        "types": list(factory.generator_types),
        "default": factory.get_default_generator_type(),
        "premium": factory.premium_generator_type,
        "implementations": {t: factory.get_generator(t).name for t in factory.generator_types},
    }
