# debug_pipeline.py
import asyncio
import json
import sys
from pathlib import Path

from deeptravel.pipeline import analyze_content, generate_structured_itinerary
from deeptravel.schemas import Destination


async def main():
    if len(sys.argv) > 1:
        # Re-run normalization and extraction over saved model output.
        raw = Path(sys.argv[1]).read_text(encoding="utf-8")
        report = analyze_content(raw)
    else:
        destination = Destination(
            id=35,
            name="Amsterdam",
            country="Netherlands",
            featured=True,
            description="Canals, gabled houses and world-class museums.",
            cuisine="Stroopwafels, bitterballen, Indonesian rijsttafel",
        )
        report = await generate_structured_itinerary(destination)

    print(report.content)
    print(json.dumps([day.model_dump() for day in report.days], indent=2))
    print(
        json.dumps(
            {
                "length": report.length,
                "all_days_extracted": report.all_days_extracted,
                "all_sections_extracted": report.all_sections_extracted,
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    asyncio.run(main())
