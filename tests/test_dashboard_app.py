from portfolio_dashboard import app


def test_saved_message_without_errors():
    assert app.saved_message("Snapshots", []) == "Snapshots saved."


def test_saved_message_mentions_rejected_cells():
    message = app.saved_message("Positions", ["Row 1, Units: Negative values are not allowed."])
    assert message == "Positions saved; 1 invalid cell(s) were not applied."
