# claim_validator/exceptions.py


class ClaimValidatorError(Exception):
    """Base class for errors raised by the claim validator."""


class PolicyNotFoundError(ClaimValidatorError):
    """Raised when the policy store has no record for a policy number."""

    def __init__(self, policy_number: str):
        self.policy_number = policy_number
        super().__init__(f"No insurance policy found for policy number '{policy_number}'")
