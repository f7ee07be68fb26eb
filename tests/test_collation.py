from toolsreg.collation import collation_key, locale_compare


def test_locale_compare_ignores_case_at_primary_level():
    assert locale_compare("alpha", "Beta") < 0
    assert locale_compare("Beta", "alpha") > 0


def test_locale_compare_orders_lowercase_before_uppercase_on_ties():
    assert locale_compare("a", "A") < 0
    assert sorted(["B", "b", "A", "a"], key=collation_key) == ["a", "A", "b", "B"]


def test_locale_compare_treats_accents_as_secondary():
    assert locale_compare("Éclair", "Fudge") < 0
    assert locale_compare("eclair", "éclair") < 0
    assert locale_compare("Same", "Same") == 0


def test_letters_without_decomposition_fold_to_base_letter():
    assert locale_compare("Øresund", "Zeta") < 0
    assert locale_compare("Łódź", "Lyon") < 0
    assert locale_compare("Æther", "Beta") < 0
    assert locale_compare("Oresund", "Øresund") < 0


def test_symbols_sort_before_digits_and_letters():
    assert sorted(["beta", "~tilde", "2fa", "alpha", "{brace}"], key=collation_key) == [
        "{brace}",
        "~tilde",
        "2fa",
        "alpha",
        "beta",
    ]
    assert locale_compare("Same Name", "Samename") < 0
