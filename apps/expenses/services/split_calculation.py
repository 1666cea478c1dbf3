"""
Expense Split Calculation
=========================

Percentage-based allocation of an expense among participants.

Every share stores a percentage and an amount. The amount is always derived
from the percentage with one rule::

    share_amount = round(amount * percentage / 100, 2)   # ROUND_HALF_UP

Equal splits distribute the percentage in basis points (1 % = 100 bp) so the
percentages of a share set always add up to exactly 100.00. Amounts are not
redistributed: when rounding makes the share amounts drift from the expense
amount by a cent or two, the drift is reported, not corrected.

Example:
    Splitting 100.00 EUR equally among three people::

        from apps.expenses.services.split_calculation import ExpenseSplitService

        percentages = ExpenseSplitService.calculate_equal_percentages([a, b, c])
        # [(a, 33.34), (b, 33.33), (c, 33.33)]

        shares = ExpenseSplitService.build_shares(Decimal('100.00'), percentages)
        # [(a, 33.34, 33.34), (b, 33.33, 33.33), (c, 33.33, 33.33)]
"""

from decimal import Decimal, ROUND_HALF_UP

from .exceptions import InvalidSplitError, NoParticipantsError

HUNDRED = Decimal('100')
CENT = Decimal('0.01')
TOTAL_BASIS_POINTS = 10000
PERCENTAGE_TOLERANCE = Decimal('0.01')


class ExpenseSplitService:
    """
    Stateless helpers for computing and validating expense shares.

    Methods:
        calculate_equal_percentages: Equal percentages with remainder handling.
        calculate_share_amount: Amount owed for a given percentage.
        percentages_from_amounts: Percentages for requested share amounts.
        build_shares: Pair every percentage with its amount.
        validate_share_set: Post-hoc check of a complete share set.
        rounding_drift: Difference between share total and expense amount.
    """

    @staticmethod
    def calculate_equal_percentages(participants):
        """
        Divide 100 % equally among participants.

        Algorithm:
            1. Work in basis points: 100 % = 10000 bp
            2. Base share: ``base = 10000 // N``
            3. Remainder: ``remainder = 10000 % N``
            4. First 'remainder' participants get ``base + 1`` bp
            5. Convert back: ``percentage = bp / 100``

        Args:
            participants (list[User]): Users to split among, in the order
                that decides who receives the extra basis points.

        Returns:
            list[tuple]: (User, Decimal percentage) pairs summing to 100.00.

        Raises:
            NoParticipantsError: If participants is empty.
        """
        if not participants:
            raise NoParticipantsError("At least one participant required")

        count = len(participants)
        base = TOTAL_BASIS_POINTS // count
        remainder = TOTAL_BASIS_POINTS % count

        result = []
        for i, user in enumerate(participants):
            basis_points = base + 1 if i < remainder else base
            result.append((user, (Decimal(basis_points) / HUNDRED).quantize(CENT)))

        # Safety check
        total = sum(pct for _, pct in result)
        if total != HUNDRED:
            raise InvalidSplitError(f"Equal split sums to {total}%, expected 100%")

        return result

    @staticmethod
    def calculate_share_amount(amount, percentage):
        """
        Amount owed for a percentage of an expense.

        Args:
            amount (Decimal): Expense amount.
            percentage (Decimal): Share percentage (0-100).

        Returns:
            Decimal: ``amount * percentage / 100`` rounded half-up to cents.
        """
        return (Decimal(amount) * Decimal(percentage) / HUNDRED).quantize(
            CENT, rounding=ROUND_HALF_UP
        )

    @staticmethod
    def percentages_from_amounts(amount, requested):
        """
        Turn requested share amounts into percentages of the expense.

        Each percentage is ``share / amount * 100`` rounded half-up to two
        places. The amounts actually stored are re-derived from these
        percentages, so they can differ from the request by a cent.

        Args:
            amount (Decimal): Expense amount.
            requested (list[tuple]): (User, Decimal share amount) pairs.

        Returns:
            list[tuple]: (User, Decimal percentage) pairs.

        Raises:
            InvalidSplitError: If the expense amount is not positive.
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise InvalidSplitError("Expense amount must be positive to split by amount")

        return [
            (user, (Decimal(share) / amount * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP))
            for user, share in requested
        ]

    @staticmethod
    def build_shares(amount, percentages):
        """
        Attach amounts to (user, percentage) pairs.

        Returns:
            list[tuple]: (User, percentage, share_amount) triples.
        """
        return [
            (user, Decimal(pct).quantize(CENT), ExpenseSplitService.calculate_share_amount(amount, pct))
            for user, pct in percentages
        ]

    @staticmethod
    def validate_share_set(amount, shares):
        """
        Validate a complete share set after it has been computed.

        Args:
            amount (Decimal): Expense amount.
            shares (list[tuple]): (User, percentage, share_amount) triples.

        Raises:
            InvalidSplitError: If the set is empty, a percentage is outside
                (0, 100], the percentages do not sum to 100 within 0.01, or an
                amount does not match the rounding rule.
        """
        if not shares:
            raise InvalidSplitError("An expense must have at least one share")

        total_percentage = Decimal('0')
        for user, pct, share_amount in shares:
            if pct <= 0 or pct > HUNDRED:
                raise InvalidSplitError(
                    f"Share percentage {pct} for {user} must be between 0 and 100"
                )
            expected = ExpenseSplitService.calculate_share_amount(amount, pct)
            if share_amount != expected:
                raise InvalidSplitError(
                    f"Share amount {share_amount} for {user} does not match "
                    f"{pct}% of {amount} ({expected})"
                )
            total_percentage += pct

        if abs(total_percentage - HUNDRED) > PERCENTAGE_TOLERANCE:
            raise InvalidSplitError(
                f"Share percentages must sum to 100, got {total_percentage}"
            )

    @staticmethod
    def rounding_drift(amount, share_amounts):
        """Sum of share amounts minus the expense amount."""
        return sum(share_amounts, Decimal('0.00')) - Decimal(amount)
