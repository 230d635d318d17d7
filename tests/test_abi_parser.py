from conftest import TOKEN_ABI
from deployhub.models import db, Abi, Blockchain, Method, EventDefinition
from deployhub.services.abi_parser import is_facet_event, parse_abi


def _abi(name="Token", data=TOKEN_ABI):
    chain = Blockchain(network_id=1, name="mainnet")
    abi = Abi(name=name, data=data, network=chain)
    db.session.add_all([chain, abi])
    db.session.commit()
    return abi


def test_functions_and_events_become_records(app):
    abi = _abi()

    parsed = parse_abi(abi, TOKEN_ABI)

    assert [m.name for m in parsed["methods"]] == ["Token.transfer"]
    assert [e.name for e in parsed["event_definitions"]] == ["Token.Transfer"]
    assert parsed["facet_events"] == []

    method = Method.query.one()
    assert method.code == "Token.transfer"
    assert method.state_mutability == "nonpayable"
    assert method.abi_id == abi.id

    event = EventDefinition.query.one()
    assert event.data == TOKEN_ABI[2]
    assert event.inputs == []


def test_parsing_twice_does_not_duplicate(app):
    abi = _abi()
    parse_abi(abi, TOKEN_ABI)
    parse_abi(abi, TOKEN_ABI)

    assert Method.query.count() == 1
    assert EventDefinition.query.count() == 1


def test_overloaded_function_is_stored_once(app):
    data = [
        {"type": "function", "name": "safeTransferFrom", "inputs": [{"type": "address"}]},
        {"type": "function", "name": "safeTransferFrom", "inputs": [{"type": "address"}, {"type": "bytes"}]},
    ]
    abi = _abi(data=data)

    parse_abi(abi, data)

    assert Method.query.count() == 1


def test_invalid_input_returns_empty_lists(app):
    assert parse_abi(None, TOKEN_ABI) == {"methods": [], "event_definitions": [], "facet_events": []}
    assert parse_abi(_abi(), {"not": "a list"})["methods"] == []


def test_no_event_is_classified_as_facet_event():
    assert is_facet_event("DiamondCutFacet", {"type": "event", "name": "DiamondCut"}) is False


def test_reparsing_refreshes_changed_entries(app):
    abi = _abi()
    parse_abi(abi, TOKEN_ABI)

    changed = [
        {"type": "function", "name": "transfer", "inputs": [{"name": "to", "type": "address"}],
         "outputs": [{"type": "bool"}], "stateMutability": "nonpayable"},
        {"type": "event", "name": "Transfer", "inputs": [{"name": "from", "type": "address", "indexed": True}]},
    ]
    parse_abi(abi, changed)

    method = Method.query.one()
    assert method.inputs == [{"name": "to", "type": "address"}]
    assert method.outputs == [{"type": "bool"}]
    event = EventDefinition.query.one()
    assert event.inputs == changed[1]["inputs"]
    assert event.data == changed[1]


def test_first_overload_wins(app):
    data = [
        {"type": "function", "name": "safeTransferFrom", "inputs": [{"type": "address"}]},
        {"type": "function", "name": "safeTransferFrom", "inputs": [{"type": "address"}, {"type": "bytes"}]},
    ]
    abi = _abi(data=data)

    parsed = parse_abi(abi, data)

    assert len(parsed["methods"]) == 1
    assert Method.query.one().inputs == [{"type": "address"}]
