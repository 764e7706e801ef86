"""
HashCalculator component for forecast change detection.
"""
import hashlib


class HashCalculator:
    """
    Fingerprints forecast text.
    SHA-256 over UTF-8 bytes, so fingerprints are also stable across restarts.
    """

    @staticmethod
    def fingerprint(text: str) -> str:
        """
        Calculates the fingerprint of a text blob.

        Args:
            text: Forecast text (may be empty)

        Returns:
            SHA-256 hex digest
        """
        return hashlib.sha256(text.encode("utf-8")).hexdigest()
