"""
Eligibility service for checking a user profile against a service's criteria
"""
import logging
import operator
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..errors import InvalidInputError
from ..models.multilingual import DEFAULT_LANGUAGE, resolve
from ..models.results import EligibilityVerdict, FailedCriterion, MissingData
from ..models.service import EligibilityCriterion
from ..models.user import UserProfile

logger = logging.getLogger(__name__)

UserData = Union[UserProfile, Mapping[str, Any], None]

# Profile key (dotted for nested records) read for each criteria type
PROFILE_FIELDS = {
    "age": "dateOfBirth",
    "income": "income",
    "residence": "address.state",
    "education": "education.level",
    "gender": "gender",
    "marital": "maritalStatus",
    "occupation": "occupation",
    "category": "category",
    "disability": "hasDisability",
}


def calculate_age(birth_date: date, today: date) -> int:
    """Whole years between birth_date and today; the birthday itself counts"""
    before_birthday = (today.month, today.day) < (birth_date.month, birth_date.day)
    return today.year - birth_date.year - int(before_birthday)


def parse_birth_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise InvalidInputError.for_field("dateOfBirth", "Date of birth must be a valid ISO 8601 date")


def as_user_data(user_data: UserData) -> Mapping[str, Any]:
    if user_data is None:
        return {}
    if isinstance(user_data, UserProfile):
        return user_data.to_user_data()
    if not isinstance(user_data, Mapping):
        raise InvalidInputError.for_field("userData", "User data must be an object")
    return user_data


def coerce_value(value: Any) -> Any:
    """Coerce digit-only strings to integers"""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return value


def compare(op, left, right) -> bool:
    """Apply a comparison operator to coerced operands; incomparable values never match"""
    try:
        return bool(op(coerce_value(left), coerce_value(right)))
    except TypeError:
        # e.g. "graduate" >= 18
        return False


def lookup(user_data: Mapping[str, Any], field: str) -> Any:
    """Read a dotted profile key; None when any segment is absent"""
    value: Any = user_data
    for key in field.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


class EligibilityService:
    """Evaluates eligibility criteria against user data"""

    def __init__(self):
        self.accessors: Dict[str, Callable[[Mapping[str, Any], str, date], Any]] = {
            "age": self._age,
            "income": self._profile_value,
            "residence": self._profile_value,
            "education": self._profile_value,
            "gender": self._profile_value,
            "marital": self._profile_value,
            "occupation": self._profile_value,
            "category": self._profile_value,
            "disability": self._profile_value,
            "other": self._profile_value,
        }
        self.methods: Dict[str, Callable[[Any, EligibilityCriterion], bool]] = {
            "range": self._range,
            "exact": self._exact,
            "minimum": self._minimum,
            "maximum": self._maximum,
            "list": self._list,
            "boolean": self._boolean,
            "custom": self._custom,
        }

    def evaluate(
        self,
        criteria: List[EligibilityCriterion],
        user_data: UserData,
        today: Optional[date] = None,
        language: str = DEFAULT_LANGUAGE
    ) -> EligibilityVerdict:
        """
        Evaluate every criterion in order against the user's data

        Args:
            criteria: Criteria in the order they are declared on the service
            user_data: Profile record (camelCase keys) or a UserProfile
            today: Evaluation date used for age; defaults to today
            language: Language used for criterion names

        Returns:
            EligibilityVerdict where ``eligible`` is True, False or "unknown"
        """
        if not criteria:
            return EligibilityVerdict(eligible=True, message="No eligibility criteria specified")

        data = as_user_data(user_data)
        today = today or date.today()
        failed_criteria: List[FailedCriterion] = []
        missing_data: List[MissingData] = []

        for criterion in criteria:
            criterion_name = resolve(criterion.name, language) or "Unnamed criterion"
            field = self.profile_field(criterion)
            user_value = self.accessors[criterion.criteria_type](data, field, today)

            if user_value is None:
                missing_data.append(MissingData(field=field, criterion_name=criterion_name))
                continue

            if not self.methods[criterion.validation_method](user_value, criterion):
                failed_criteria.append(FailedCriterion(
                    criteria_type=criterion.criteria_type,
                    criterion_name=criterion_name,
                    user_value=user_value,
                    requirement=self.describe_requirement(criterion)
                ))

        if failed_criteria:
            eligible, message = False, "User does not meet eligibility criteria"
        elif missing_data:
            eligible, message = "unknown", "Missing required information to determine eligibility"
        else:
            eligible, message = True, "User meets all eligibility criteria"

        logger.debug(
            f"Evaluated {len(criteria)} criteria: {len(failed_criteria)} failed, "
            f"{len(missing_data)} missing"
        )
        return EligibilityVerdict(
            eligible=eligible,
            message=message,
            failed_criteria=failed_criteria,
            missing_data=missing_data
        )

    @staticmethod
    def profile_field(criterion: EligibilityCriterion) -> str:
        if criterion.criteria_type == "other":
            return criterion.custom_field or criterion.criteria_type.lower()
        return PROFILE_FIELDS[criterion.criteria_type]

    @staticmethod
    def describe_requirement(criterion: EligibilityCriterion) -> str:
        """Human readable form of what the criterion expects"""
        method = criterion.validation_method
        low, high = criterion.min_value, criterion.max_value
        if method == "range":
            if low is not None and high is not None:
                return f"Between {low} and {high}"
            if low is not None:
                return f"At least {low}"
            return f"At most {high}"
        if method == "exact":
            return f"Exactly {low}"
        if method == "minimum":
            return f"Minimum {low}"
        if method == "maximum":
            return f"Maximum {high}"
        if method == "list":
            return f"One of: {', '.join(criterion.allowed_values)}"
        if method == "boolean":
            return "Must be true"
        return "Custom validation"

    # Accessors
    def _age(self, user_data, field, today):
        raw = lookup(user_data, field)
        if raw is None:
            return None
        return calculate_age(parse_birth_date(raw), today)

    def _profile_value(self, user_data, field, today):
        return lookup(user_data, field)

    # Validation methods
    def _range(self, value, criterion):
        low, high = criterion.min_value, criterion.max_value
        return (
            (low is None or compare(operator.ge, value, low)) and
            (high is None or compare(operator.le, value, high))
        )

    def _exact(self, value, criterion):
        return coerce_value(value) == coerce_value(criterion.min_value)

    def _minimum(self, value, criterion):
        return compare(operator.ge, value, criterion.min_value)

    def _maximum(self, value, criterion):
        return compare(operator.le, value, criterion.max_value)

    def _list(self, value, criterion):
        return value in criterion.allowed_values

    def _boolean(self, value, criterion):
        return bool(value)

    def _custom(self, value, criterion):
        # Extension point; custom rules are not interpreted yet
        return True


# Global eligibility service instance
eligibility_service = EligibilityService()
