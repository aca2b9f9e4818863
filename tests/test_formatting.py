from app.advisory.formatting import CurrencyFormatter, percent, plain_percent, round_half_up

western = CurrencyFormatter()
indian = CurrencyFormatter(grouping="indian")


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
    assert round_half_up(-2.5) == -2


def test_western_grouping():
    assert western.number(1234567) == "1,234,567"
    assert western.number(999) == "999"
    assert western.number(-2500) == "-2,500"
    assert western.currency(20000) == "₹20,000"


def test_indian_grouping():
    assert indian.number(1000) == "1,000"
    assert indian.number(100000) == "1,00,000"
    assert indian.number(1234567) == "12,34,567"
    assert indian.currency(150000) == "₹1,50,000"


def test_fraction_digits_are_trimmed():
    assert western.number(1500.5) == "1,500.5"
    assert western.number(0.1234) == "0.123"
    assert western.number(20000.0) == "20,000"
    assert indian.number(123456.25) == "1,23,456.25"


def test_custom_symbol():
    assert CurrencyFormatter(symbol="$").currency(1234.5) == "$1,234.5"


def test_percent_helpers():
    assert percent(0.8) == "80.0"
    assert percent(2 / 3) == "66.7"
    assert percent(32100 / 40000) == "80.3"
    assert percent(0.15, digits=0) == "15"
    assert percent(-0.25) == "-25.0"
    assert plain_percent(0.4) == "40"
    assert plain_percent(0.07) == "7"
    assert plain_percent(0.125) == "12.5"
