"""Embedding utilities.

Chunks and queries are embedded with a deterministic feature-hashing model so
the pipeline runs without a hosted embedding API. Any object exposing the same
``encode``/``dim`` surface can be injected in its place.
"""

from __future__ import annotations

import hashlib
import math
import re
from array import array
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

_WORD_RE = re.compile(r"\w+")
_PERSON = b"chunkwise"


@dataclass(slots=True)
class EmbeddingBatch:
    vectors: list[list[float]]
    model: str
    dim: int


class EmbeddingModel:
    """Signed feature hashing over lowercased word counts.

    Each word lands in one of ``dim`` buckets with a sign taken from the same
    digest, weighted by ``1 + log(count)``. Output vectors have unit length,
    except for text without words, which embeds to the zero vector.
    """

    _instances: dict[tuple[str, int], "EmbeddingModel"] = {}

    def __init__(self, model_name: str, dim: int = 384) -> None:
        self.model_name = model_name
        self._dim = dim

    @classmethod
    def get(cls, model_name: str, dim: int = 384) -> "EmbeddingModel":
        key = (model_name or "hashed", dim)
        model = cls._instances.get(key)
        if model is None:
            model = cls._instances[key] = cls(*key)
        return model

    @property
    def dim(self) -> int:
        return self._dim

    def encode(self, texts: Iterable[str]) -> EmbeddingBatch:
        return EmbeddingBatch(vectors=list(map(self.encode_one, texts)), model=self.model_name, dim=self._dim)

    def encode_one(self, text: str) -> list[float]:
        buckets = [0.0] * self._dim
        for word, count in Counter(_WORD_RE.findall(text.lower())).items():
            slot, sign = self._bucket(word)
            buckets[slot] += sign * (1.0 + math.log(count))
        length = math.hypot(*buckets)
        if not length:
            return buckets
        return [value / length for value in buckets]

    def _bucket(self, word: str) -> tuple[int, float]:
        value = int.from_bytes(
            hashlib.blake2b(word.encode("utf-8"), digest_size=8, person=_PERSON).digest(), "little"
        )
        return value % self._dim, -1.0 if value >> 63 else 1.0

    @staticmethod
    def as_bytes(vector: Sequence[float]) -> bytes:
        return array("f", vector).tobytes()

    @staticmethod
    def from_bytes(blob: bytes) -> list[float]:
        floats = array("f")
        floats.frombytes(blob)
        return list(floats)


__all__ = ["EmbeddingModel", "EmbeddingBatch"]
