"""
Quiz result computation shared by the result screen and the API.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from utils import is_number

PASS_THRESHOLD = 60
PASSED = 'Passed'
FAILED = 'Failed'

SHARE_TEMPLATE = ('I just completed {title}! I scored {obtained}/{total} '
                  'and achieved the status of {status}. \U0001F389')


@dataclass(frozen=True)
class QuestionOutcome:
    is_match: bool
    score: Any = 0

    @classmethod
    def from_dict(cls, data: Mapping) -> 'QuestionOutcome':
        return cls(is_match=bool(data.get('isMatch')), score=data.get('score'))


@dataclass
class ResultSummary:
    attempted: int
    total_questions: Optional[int]
    obtained_score: float
    total_score: float
    status: str
    time_spent: Optional[str] = None
    actions: List[str] = field(default_factory=list)

    @property
    def percent(self) -> float:
        if self.total_score <= 0:
            return 0.0
        return self.obtained_score / self.total_score * 100

    @property
    def passed(self) -> bool:
        return self.status == PASSED


def obtained_score(result: Iterable[QuestionOutcome]):
    return sum(item.score for item in result if item.is_match and is_number(item.score))


def result_status(obtained, total_score) -> str:
    if not is_number(total_score) or total_score <= 0:
        return FAILED
    # Cross-multiplied so exactly 60% is not lost to float rounding
    return PASSED if obtained * 100 >= PASS_THRESHOLD * total_score else FAILED


def available_actions(status: str) -> List[str]:
    if status == PASSED:
        return ['download_certificate', 'share_linkedin']
    return ['retry']


def convert_seconds(seconds) -> str:
    """Format a duration as '1h 2m 3s', dropping leading zero units."""
    seconds = max(int(seconds or 0), 0)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    parts = []
    if hours:
        parts.append(f'{hours}h')
    if hours or minutes:
        parts.append(f'{minutes}m')
    parts.append(f'{secs}s')
    return ' '.join(parts)


def summarize(result: Iterable[QuestionOutcome], total_score, total_questions=None,
              time_spent_seconds=None) -> ResultSummary:
    outcomes = list(result)
    obtained = obtained_score(outcomes)
    status = result_status(obtained, total_score)
    return ResultSummary(
        attempted=len(outcomes),
        total_questions=total_questions,
        obtained_score=obtained,
        total_score=total_score,
        status=status,
        time_spent=convert_seconds(time_spent_seconds) if time_spent_seconds is not None else None,
        actions=available_actions(status),
    )


def share_message(summary: ResultSummary, quiz_title: str) -> str:
    return SHARE_TEMPLATE.format(
        title=quiz_title,
        obtained=_plain_number(summary.obtained_score),
        total=_plain_number(summary.total_score),
        status=summary.status,
    )


def _plain_number(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
