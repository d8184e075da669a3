import pytest

from rentdesk.services.document_validation import is_valid_cnpj, is_valid_cpf, validate_document


@pytest.mark.parametrize("doc", ["529.982.247-25", "52998224725"])
def test_valid_cpf(doc):
    assert is_valid_cpf(doc)
    assert validate_document(doc) == (True, "CPF")


@pytest.mark.parametrize("doc", ["529.982.247-26", "111.111.111-11", "5299822472"])
def test_invalid_cpf(doc):
    assert not is_valid_cpf(doc)


@pytest.mark.parametrize("doc", ["11.222.333/0001-81", "11222333000181"])
def test_valid_cnpj(doc):
    assert is_valid_cnpj(doc)
    assert validate_document(doc) == (True, "CNPJ")


def test_invalid_cnpj_check_digit():
    assert validate_document("11.222.333/0001-82") == (False, "CNPJ")
    assert not is_valid_cnpj("00000000000000")


def test_unknown_length_has_no_type():
    assert validate_document("12345") == (False, None)
    assert validate_document("") == (False, None)


def test_validate_endpoint(client, make_user, bearer):
    user = make_user()

    ok = client.get("/api/v1/users/document/validate/52998224725", headers=bearer(user))
    bad = client.get("/api/v1/users/document/validate/123", headers=bearer(user))

    assert ok.status_code == 200
    assert ok.json() == {"valid": True, "type": "CPF"}
    assert bad.json() == {"valid": False, "type": None}
