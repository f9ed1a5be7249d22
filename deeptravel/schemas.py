from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from deeptravel.config import GeneratorType

# ------- Domain models -------
class Destination(BaseModel):
    """Destination record handed in by the storage layer; treated as read-only."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel, frozen=True)

    id: Optional[int] = None
    name: str
    country: str
    region_id: Optional[int] = None
    description: Optional[str] = None
    immersive_description: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool = False
    rating: Optional[str] = None
    best_time_to_visit: Optional[str] = None
    local_tips: Optional[str] = None
    geography: Optional[str] = None
    culture: Optional[str] = None
    cuisine: Optional[str] = None

class SectionFlags(BaseModel):
    morning: bool = False
    lunch: bool = False
    afternoon: bool = False
    evening: bool = False

class DaySections(BaseModel):
    morning: Optional[str] = None
    lunch: Optional[str] = None
    afternoon: Optional[str] = None
    evening: Optional[str] = None

    def flags(self) -> SectionFlags:
        return SectionFlags(
            morning=self.morning is not None,
            lunch=self.lunch is not None,
            afternoon=self.afternoon is not None,
            evening=self.evening is not None,
        )

class DayExtractionSummary(BaseModel):
    day: int
    extracted: bool
    sections: SectionFlags = Field(default_factory=SectionFlags)

class ExtractedDay(BaseModel):
    day_number: int
    raw_block: Optional[str] = None
    sections: DaySections = Field(default_factory=DaySections)
    extracted: bool = False
    exists: bool = False       # literal "# Day N" present even though no pattern matched
    pattern: Optional[str] = None

    @property
    def complete(self) -> bool:
        flags = self.sections.flags()
        return self.extracted and all((flags.morning, flags.lunch, flags.afternoon, flags.evening))

    def summary(self) -> DayExtractionSummary:
        return DayExtractionSummary(day=self.day_number, extracted=self.extracted, sections=self.sections.flags())

# ------- Reports -------
class ExtractionReport(BaseModel):
    content: str
    length: int
    days: List[DayExtractionSummary] = Field(default_factory=list)
    all_days_extracted: bool = False
    all_sections_extracted: bool = False

class ItineraryReport(ExtractionReport):
    destination: Destination
    generator_type: GeneratorType
    raw_content: str

# ------- Request models -------
class GenerateItineraryRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)

    destination: Destination
    generator_type: Optional[GeneratorType] = None

class GenerateDayRequest(GenerateItineraryRequest):
    day_number: int

class ContentRequest(BaseModel):
    content: str = ""
    normalize: bool = True

class SampleExtractionRequest(BaseModel):
    destination: Destination
