# job_matcher.py
import re
import logging
from enum import Enum
from typing import Any, List, Optional, Sequence

from models import CandidateRanking, ParsedJobRequirement, ParsedResume, PositionMatch, SkillMatchResult
from resume_parser import round_half_up

logger = logging.getLogger(__name__)

# A required skill found in a group matches a candidate holding any member of it
TECHNOLOGY_EQUIVALENTS = (
    ('sql', 'mysql', 'postgresql', 'ms sql', 'sql server'),
    ('aws', 'amazon web services'),
    ('gcp', 'google cloud platform', 'google cloud'),
    ('azure', 'microsoft azure'),
    ('react', 'react.js'),
    ('vue', 'vue.js'),
    ('angular', 'angular.js'),
    ('node', 'node.js'),
    ('ml', 'machine learning'),
    ('ai', 'artificial intelligence'),
    ('ci/cd', 'continuous integration', 'continuous deployment'),
    ('k8s', 'kubernetes'),
)

QUALIFIED = "Qualified"
NOT_QUALIFIED = "Not Qualified"


class SkillBandPolicy(str, Enum):
    QUALIFIED_TIERED = "qualified-tiered"
    SELECT_HOLD_REJECT = "select-hold-reject"


class ExperiencePolicy(str, Enum):
    AT_LEAST = "at-least"
    WITHIN_ONE_YEAR = "within-one-year"


# (lower bound, label), highest first
SKILL_BANDS = {
    SkillBandPolicy.QUALIFIED_TIERED: ((80, "Highly Qualified"), (50, QUALIFIED), (0, NOT_QUALIFIED)),
    SkillBandPolicy.SELECT_HOLD_REJECT: ((70, "Select"), (40, "Hold"), (0, "Reject")),
}


def normalize_skill_list(skills: Optional[Sequence[Any]]) -> List[str]:
    """Lowercase and trim; non-strings and empty entries are dropped."""
    if not skills:
        return []
    cleaned = (s.strip().lower() for s in skills if isinstance(s, str))
    return [s for s in cleaned if s]


def _contains_word(haystack: str, needle: str) -> bool:
    # space-delimited containment: "lambda" is in "aws lambda", "java" is not in "javascript"
    return f" {needle} " in f" {haystack} "


def _partial_match(required: str, candidate_skills: List[str]) -> bool:
    parts = required.split()
    if len(parts) < 2:
        return False
    return any(all(part in cand for part in parts) for cand in candidate_skills)


def _substantial_match(required: str, candidate_skills: List[str]) -> bool:
    return any(_contains_word(cand, required) or _contains_word(required, cand) for cand in candidate_skills)


def _equivalent_match(required: str, candidate_skills: List[str]) -> bool:
    for group in TECHNOLOGY_EQUIVALENTS:
        if required not in group:
            continue
        if any(_contains_word(cand, equivalent) for cand in candidate_skills for equivalent in group):
            return True
    return False


def match_skills(candidate_skills: Optional[Sequence[Any]],
                 required_skills: Optional[Sequence[Any]]) -> SkillMatchResult:
    """
    Count how many required skills the candidate covers.

    Each required entry is matched at most once, trying in order: exact
    equality, every word of a multi-word requirement inside one candidate
    skill, whole-word containment either way, and the technology
    equivalence groups.
    """
    candidates = normalize_skill_list(candidate_skills)
    required = normalize_skill_list(required_skills)
    if not candidates or not required:
        return SkillMatchResult(0, len(required), 0, [])

    matched = [False] * len(required)
    for tier in (lambda req: req in candidates, lambda req: _partial_match(req, candidates),
                 lambda req: _substantial_match(req, candidates), lambda req: _equivalent_match(req, candidates)):
        for i, req in enumerate(required):
            if not matched[i] and tier(req):
                matched[i] = True

    matched_skills = [req for i, req in enumerate(required) if matched[i]]
    percentage = round_half_up(len(matched_skills) / len(required) * 100)
    return SkillMatchResult(len(matched_skills), len(required), percentage, matched_skills)


def match_percentage(candidate_skills: Optional[Sequence[Any]], required_skills: Optional[Sequence[Any]]) -> int:
    return match_skills(candidate_skills, required_skills).percentage


def skill_result(percentage: int, policy: SkillBandPolicy = SkillBandPolicy.QUALIFIED_TIERED) -> str:
    for lower_bound, label in SKILL_BANDS[SkillBandPolicy(policy)]:
        if percentage >= lower_bound:
            return label
    return SKILL_BANDS[SkillBandPolicy(policy)][-1][1]


def parse_years(value: Any) -> int:
    """Leading integer of an experience value; anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    m = re.match(r'\s*(\d+)', str(value or ''))
    return int(m.group(1)) if m else 0


def experience_result(candidate_experience: Any, required_experience: Any,
                      policy: ExperiencePolicy = ExperiencePolicy.AT_LEAST) -> str:
    candidate_years = parse_years(candidate_experience)
    required_years = parse_years(required_experience)
    if ExperiencePolicy(policy) is ExperiencePolicy.WITHIN_ONE_YEAR:
        qualified = abs(candidate_years - required_years) <= 1
    else:
        qualified = candidate_years >= required_years
    return QUALIFIED if qualified else NOT_QUALIFIED


def match_position(candidate: ParsedResume, job: ParsedJobRequirement,
                   skill_policy: SkillBandPolicy = SkillBandPolicy.QUALIFIED_TIERED,
                   experience_policy: ExperiencePolicy = ExperiencePolicy.AT_LEAST) -> PositionMatch:
    result = match_skills(candidate.skills, job.skills)
    return PositionMatch(
        title=job.title or job.file_name,
        percentage=result.percentage,
        skill_result=skill_result(result.percentage, skill_policy),
        experience_result=experience_result(candidate.experience, job.experience, experience_policy),
        matched_skills=result.matched_skills,
    )


def rank_candidates(candidates: List[ParsedResume], jobs: List[ParsedJobRequirement],
                    skill_policy: SkillBandPolicy = SkillBandPolicy.QUALIFIED_TIERED,
                    experience_policy: ExperiencePolicy = ExperiencePolicy.AT_LEAST) -> List[CandidateRanking]:
    """Match every candidate against every job and order candidates by their best position."""
    rankings = []
    for candidate in candidates:
        matches = [match_position(candidate, job, skill_policy, experience_policy) for job in jobs]
        best = None
        for m in matches:
            if best is None or m.percentage > best.percentage:
                best = m
        rankings.append(CandidateRanking(candidate, matches, best))
        logger.debug("Ranked %s: best %s%%", candidate.name or candidate.file_name,
                     best.percentage if best else 0)

    # stable sort keeps upload order among equal scores
    rankings.sort(key=lambda r: r.best_percentage, reverse=True)
    return rankings
