from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerEntry:
    """
    Persisted association between a monitoring problem and its remote ticket.
    """
    problem_id: int
    ticket_id: int
    ticket_number: str = ""

    def __str__(self) -> str:
        return (
            f"ProblemID {self.problem_id} -> TicketID {self.ticket_id} "
            f"(TicketNumber {self.ticket_number})"
        )
