"""
Fee calculation with category waivers and variable-factor adjustments
"""
import logging
import operator
from typing import Any, Callable, Dict, List, Mapping

from ..models.multilingual import DEFAULT_LANGUAGE, resolve
from ..models.results import FeeLine, FeeResult, WaivedFee
from ..models.service import FeeRule
from .eligibility_service import UserData, as_user_data, compare

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "INR"

# Fixed adjustment bands
LOW_INCOME_THRESHOLD = 300000
HIGH_INCOME_THRESHOLD = 1000000
LOW_INCOME_MULTIPLIER = 0.5
HIGH_INCOME_MULTIPLIER = 1.5
MINOR_AGE = 18
SENIOR_AGE = 60
MINOR_MULTIPLIER = 0.5
SENIOR_MULTIPLIER = 0.75


class FeeService:
    """Computes payable fees for a user"""

    def __init__(self):
        self.waiver_checks: Dict[str, Callable[[Mapping[str, Any]], bool]] = {
            "bpl": lambda data: bool(data.get("isBPL")),
            "senior": lambda data: data.get("age") is not None and compare(operator.ge, data["age"], SENIOR_AGE),
            "student": lambda data: bool(data.get("isStudent")),
            "disability": lambda data: bool(data.get("hasDisability")),
            "female": lambda data: data.get("gender") == "female",
        }
        self.factor_adjusters: Dict[str, Callable[[float, Mapping[str, Any]], float]] = {
            "income": self._adjust_for_income,
            "age": self._adjust_for_age,
        }

    def calculate(
        self,
        fees: List[FeeRule],
        user_data: UserData,
        language: str = DEFAULT_LANGUAGE
    ) -> FeeResult:
        """
        Calculate the total fee for a user

        Waived fees are listed under ``waivers`` at their base amount and are
        excluded from the total. Variable factors compound in declaration
        order on non-waived fees.
        """
        if not fees:
            return FeeResult(
                total_amount=0,
                currency=DEFAULT_CURRENCY,
                message="No fees associated with this service"
            )

        data = as_user_data(user_data)
        # NOTE: the currency of the first rule is reported for the whole
        # result even when later rules declare a different one.
        result = FeeResult(
            total_amount=0,
            currency=fees[0].currency or DEFAULT_CURRENCY,
            message="Fees calculated successfully"
        )

        for fee in fees:
            name = resolve(fee.name, language)
            waiver_reason = self.waiver_reason(fee, data, language)

            if waiver_reason is not None:
                result.waivers.append(WaivedFee(
                    fee_type=fee.fee_type,
                    name=name,
                    amount=fee.amount,
                    reason=waiver_reason
                ))
                continue

            fee_amount = fee.amount
            for variable_factor in fee.variable_factors:
                adjuster = self.factor_adjusters.get(variable_factor.factor)
                if adjuster is not None:
                    fee_amount = adjuster(fee_amount, data)

            result.breakdown.append(FeeLine(
                fee_type=fee.fee_type,
                name=name,
                amount=fee_amount,
                description=resolve(fee.description, language)
            ))
            result.total_amount += fee_amount

        logger.debug(
            f"Calculated fees: total={result.total_amount} {result.currency}, "
            f"{len(result.waivers)} waived"
        )
        return result

    def waiver_reason(self, fee: FeeRule, data: Mapping[str, Any], language: str = DEFAULT_LANGUAGE):
        """Reason text when any declared waiver category matches, else None"""
        if fee.waiver is None or not fee.waiver.eligibility:
            return None
        matched = any(
            self.waiver_checks[category](data)
            for category in fee.waiver.eligibility
            if category in self.waiver_checks
        )
        if not matched:
            return None
        return resolve(fee.waiver.description, language) or "Eligible for fee waiver"

    @staticmethod
    def _adjust_for_income(amount: float, data: Mapping[str, Any]) -> float:
        income = data.get("income")
        if income is None:
            return amount
        if compare(operator.lt, income, LOW_INCOME_THRESHOLD):
            return amount * LOW_INCOME_MULTIPLIER
        if compare(operator.gt, income, HIGH_INCOME_THRESHOLD):
            return amount * HIGH_INCOME_MULTIPLIER
        return amount

    @staticmethod
    def _adjust_for_age(amount: float, data: Mapping[str, Any]) -> float:
        age = data.get("age")
        if age is None:
            return amount
        if compare(operator.lt, age, MINOR_AGE):
            return amount * MINOR_MULTIPLIER
        if compare(operator.ge, age, SENIOR_AGE):
            return amount * SENIOR_MULTIPLIER
        return amount


# Global fee service instance
fee_service = FeeService()
