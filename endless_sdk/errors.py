# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the Endless SDK.

Every error the SDK raises on purpose derives from `EndlessSdkError`, so callers can catch the whole family at once or
pick the specific failure they know how to handle.
"""


class EndlessSdkError(Exception):
    """Base class of all the SDK errors."""


class EncodingError(EndlessSdkError):
    """Raised when a value can not be encoded to, or decoded from, its canonical form.

    This covers malformed BCS input, out of range integers, invalid addresses, unparsable type tags and arguments that
    do not match a function ABI. The operation that raised it has not produced a partial result.
    """


class CryptoError(EndlessSdkError):
    """Raised on key construction, signing or signature verification failures."""


class NetworkError(EndlessSdkError):
    """Raised when the node could not be reached or the transport failed mid-request.

    Retrying the same request may succeed.
    """


class ApiError(EndlessSdkError):
    """Exception raised when the API returns a non-200 response.

    Attributes:
        status_code (int): The HTTP status code returned.

    """

    status_code: int

    def __init__(self, message: str, status_code: int):
        """Initialize the exception with message and response status code.

        Args:
            message (str): Error message.
            status_code (int): The HTTP status code returned.

        """
        self.status_code = status_code
        super().__init__(f"{{message: {message}, status_code: {status_code}}}")


class RejectionError(ApiError):
    """Exception raised when the node rejected a well-formed transaction.

    Typical causes are a stale sequence number, insufficient gas or balance and a failed execution. Resubmitting the
    same transaction will not help.
    """


class TransactionWaitTimeoutReachedError(EndlessSdkError, TimeoutError):
    """Exception raised when the transaction is in 'Pending' state even after max transaction wait time.

    The transaction may still be committed later, callers should query it again rather than assume it failed.

    Attributes:
        tx_hash (str): Transaction hash.

    """

    def __init__(self, tx_hash: str, transaction_wait_time_in_seconds: float):
        """Initializes the exception with transaction hash and wait time.

        Args:
            tx_hash (str): Transaction hash
            transaction_wait_time_in_seconds (float): Transaction wait time.

        """
        self.tx_hash = tx_hash
        super().__init__(
            f"{tx_hash} transaction didn't processed within {transaction_wait_time_in_seconds} seconds"
        )


class FaucetRequestNotAcceptedError(EndlessSdkError):
    """Exception raised when faucet request is not accepted by the faucet."""

    def __init__(self, message: str = "Faucet request is not accepted by the node"):
        """Initializes the exception with a default message."""
        super().__init__(message)
