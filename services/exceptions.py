"""Error hierarchy for settlement and code pool operations."""


class FareSettlementError(Exception):
     """Base exception for all settlement-service errors."""

     code = "error"


class SettlementError(FareSettlementError):
     """Raised when a payment confirmation cannot be applied."""


class ValidationError(SettlementError):
     """A required field is missing or malformed. Not safe to retry unchanged."""

     code = "validation_error"


class StorageError(SettlementError):
     """The persistence layer failed. Retrying the identical request is safe."""

     code = "storage_error"


class TransactionNotFound(SettlementError):
     """No transaction exists for the given external reference."""

     code = "transaction_not_found"


class CodePoolError(FareSettlementError):
     """Base exception for short-code allocation errors."""


class InvalidCodeFormat(CodePoolError):
     """The code string does not end in three base digits and a check digit."""

     code = "invalid_code_format"


class ChecksumMismatch(CodePoolError):
     """The check digit is not the digital root of the base."""

     code = "checksum_mismatch"

     def __init__(self, base: str, provided: str, expected: int):
          self.base = base
          self.provided = provided
          self.expected = expected
          super().__init__(f"checksum mismatch for base {base}; expected {expected}, got {provided}")


class UnknownBase(CodePoolError):
     """The base is not part of the code pool."""

     code = "unknown_base"


class AlreadyAllocated(CodePoolError):
     """The code is already assigned to an owner."""

     code = "already_allocated"


class OutOfCodesError(CodePoolError):
     """Every code in the pool is allocated."""

     code = "out_of_codes"
