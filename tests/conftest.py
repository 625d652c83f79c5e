"""
Shared fixtures: deterministic keys and the token ``transfer`` schema in both
its class-bound and ABI forms.
"""

import pytest

from antelope_client.chain import ABI, Asset, Field, Name, PrivateKey, Struct


class Transfer(Struct):
    abi_name = "transfer"
    abi_fields = [
        Field("from", Name),
        Field("to", Name),
        Field("quantity", Asset),
        Field("memo", "string"),
    ]


TOKEN_ABI = {
    "structs": [
        {
            "base": "",
            "name": "transfer",
            "fields": [
                {"name": "from", "type": "name"},
                {"name": "to", "type": "name"},
                {"name": "quantity", "type": "asset"},
                {"name": "memo", "type": "string"},
            ],
        }
    ],
    "actions": [{"name": "transfer", "type": "transfer", "ricardian_contract": ""}],
}

K1_WIF = "5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3"

CHAIN_ID = "aca376f206b8fc25a6ed44dbdc66547c36c6c33e3a119ffbeaef943642f0e906"


@pytest.fixture
def transfer_cls():
    """Class-bound ``transfer`` struct."""
    return Transfer


@pytest.fixture
def token_abi():
    """ABI of the token contract with only the ``transfer`` action."""
    return ABI.from_(TOKEN_ABI)


@pytest.fixture
def k1_key():
    """Deterministic K1 private key."""
    return PrivateKey.from_(K1_WIF)


@pytest.fixture
def r1_key():
    """Freshly generated R1 private key."""
    return PrivateKey.generate("R1")


@pytest.fixture
def chain_id():
    return CHAIN_ID
