from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal
from enum import Enum
from typing import ClassVar, Union


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeState(Enum):
    NONE = "none"
    DISPUTED = "disputed"


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Deposit:
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Withdrawal:
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Dispute:
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Resolve:
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Chargeback:
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK

    client_id: int
    tx_id: int


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

# Balance arithmetic never rounds: additions and subtractions are exact at this precision.
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


@dataclass(frozen=True)
class LedgerEntry:
    """A recorded deposit and where it stands in the dispute lifecycle."""

    client_id: int
    tx_id: int
    amount: Decimal
    state: DisputeState = DisputeState.NONE

    @property
    def is_disputed(self) -> bool:
        return self.state is DisputeState.DISPUTED


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return EXACT_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = EXACT_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = EXACT_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = EXACT_CONTEXT.subtract(self.available, amount)
        self.held = EXACT_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = EXACT_CONTEXT.subtract(self.held, amount)
        self.available = EXACT_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = EXACT_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for tracking how many transactions were applied or ignored."""

    def __init__(self):
        self.processed = 0
        self.ignored = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        else:
            self.ignored += 1

    @property
    def total(self) -> int:
        return self.processed + self.ignored
