from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from assistant.db.models import Base
from assistant.store.memory import InMemoryArchitectureStore
from assistant.store.sql import SqlArchitectureStore
from conftest import make_architecture


def test_memory_store_copies_records():
    store = InMemoryArchitectureStore()
    architecture = make_architecture()
    store.set("a", architecture)

    architecture.metadata["prompt"] = "changed after set"
    fetched = store.get("a")
    fetched.nodes.clear()

    again = store.get("a")
    assert again.metadata["prompt"] == "Serverless order processing"
    assert len(again.nodes) == 2
    assert store.get("missing") is None


def test_sql_store_round_trip(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'arch.db'}")
    Base.metadata.create_all(bind=engine)
    store = SqlArchitectureStore(sessionmaker(bind=engine))

    architecture = make_architecture()
    store.set("abc", architecture)
    fetched = store.get("abc")

    assert fetched.nodes[0].data.est_cost == "$10/month"
    assert fetched.edges[0].data.data_flow == "Order writes"
    assert fetched.nodes[0].model_extra == {"type": "default"}
    assert fetched.metadata == architecture.metadata

    fetched.metadata["cdkCode"] = "x"
    store.set("abc", fetched)
    assert store.get("abc").metadata["cdkCode"] == "x"
    assert store.get("nope") is None


def test_sql_store_keeps_explicit_nulls_outside_declared_fields(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'arch.db'}")
    Base.metadata.create_all(bind=engine)
    store = SqlArchitectureStore(sessionmaker(bind=engine))

    architecture = make_architecture()
    architecture.metadata["cdkCode"] = None
    architecture.nodes[1].group = None
    store.set("abc", architecture)

    payload = store.get("abc").to_payload()

    assert payload["metadata"]["cdkCode"] is None
    assert "group" in payload["nodes"][1]
    assert payload["nodes"][1]["group"] is None
    # unset declared optionals stay out of the payload
    assert "style" not in payload["nodes"][1]
    assert "description" not in payload["nodes"][1]["data"]
