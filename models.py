from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class DocumentKind(str, Enum):
    RESUME = "resume"
    JOB_REQUIREMENT = "job_requirement"


@dataclass
class ExtractedContact:
    email: str = ""
    phone: str = ""


@dataclass
class ParsedResume:
    name: str = ""
    email: str = ""
    phone: str = ""
    skills: List[str] = field(default_factory=list)
    experience: str = ""
    education: str = ""
    file_name: str = ""
    # True when nothing beyond filename-derived fields could be extracted
    incomplete: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedJobRequirement:
    title: str = ""
    skills: List[str] = field(default_factory=list)
    experience: str = ""
    responsibilities: List[str] = field(default_factory=list)
    file_name: str = ""
    incomplete: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WorkPeriod:
    start: date
    end: date


@dataclass
class SkillMatchResult:
    matched_count: int
    required_count: int
    percentage: int
    matched_skills: List[str] = field(default_factory=list)


@dataclass
class PositionMatch:
    title: str
    percentage: int
    skill_result: str
    experience_result: str
    matched_skills: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CandidateRanking:
    candidate: ParsedResume
    position_matches: List[PositionMatch] = field(default_factory=list)
    best_match: Optional[PositionMatch] = None

    @property
    def best_percentage(self) -> int:
        return self.best_match.percentage if self.best_match else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'candidate': self.candidate.to_dict(),
            'position_matches': [m.to_dict() for m in self.position_matches],
            'best_match': self.best_match.to_dict() if self.best_match else None,
        }
