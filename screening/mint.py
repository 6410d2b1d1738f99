"""
Solana mint address validation.
"""

from solders.pubkey import Pubkey

from .errors import InvalidMintError


def validate_mint(address) -> str:
    """
    Validate a token mint address and return its canonical base58 form.

    Surrounding whitespace (e.g. a trailing newline from stdin) is ignored.

    Raises:
        InvalidMintError: empty input or not a 32-byte base58 public key
    """
    if not isinstance(address, str):
        raise InvalidMintError(address, "mint must be a string")

    candidate = address.strip()
    if not candidate:
        raise InvalidMintError(address, "empty mint address")

    try:
        pubkey = Pubkey.from_string(candidate)
    except (ValueError, TypeError) as e:
        raise InvalidMintError(address, f"invalid pubkey ({e})") from e

    return str(pubkey)


def is_valid_mint(address) -> bool:
    try:
        validate_mint(address)
    except InvalidMintError:
        return False
    return True
