# tests/test_embedding_service.py

import numpy as np

from claim_validator.embedding_service import EmbeddingService


class StubModel:
    """Stands in for SentenceTransformer: one row per text, [len(text), 1.0]."""

    def __init__(self, fail=False):
        self.fail = fail
        self.batches = []

    def encode(self, texts, convert_to_numpy=True):
        self.batches.append(list(texts))
        if self.fail:
            raise RuntimeError("model unavailable")
        return np.array([[float(len(text)), 1.0] for text in texts])


def _service(model):
    service = EmbeddingService(model_name="stub", dimension=2)
    service._model = model
    return service


def test_embed_returns_plain_floats():
    service = _service(StubModel())
    assert service.embed("stroke") == [6.0, 1.0]


def test_blank_text_is_not_sent_to_the_model():
    model = StubModel()
    service = _service(model)
    assert service.embed("   ") == [0.0, 0.0]
    assert service.embed(None) == [0.0, 0.0]
    assert model.batches == []


def test_embed_many_encodes_in_one_batch():
    model = StubModel()
    service = _service(model)
    vectors = service.embed_many(["heart", "", None, "craniotomy"])

    assert vectors == [[5.0, 1.0], [0.0, 0.0], [0.0, 0.0], [10.0, 1.0]]
    assert model.batches == [["heart", "craniotomy"]]


def test_embed_many_with_nothing_to_encode():
    model = StubModel()
    assert _service(model).embed_many(["", None]) == [[0.0, 0.0], [0.0, 0.0]]
    assert model.batches == []


def test_encoder_failure_gives_zero_vectors():
    service = _service(StubModel(fail=True))
    assert service.embed("stroke") == [0.0, 0.0]
    assert service.embed_many(["stroke", "angina"]) == [[0.0, 0.0], [0.0, 0.0]]
