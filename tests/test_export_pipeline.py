from __future__ import annotations


def test_export_resolves_pinned_ids_and_names(tmp_path, fake_steam):
    import pandas as pd

    from steam_game_lookup.pipelines.export_pipeline import run_export
    from steam_game_lookup.utils.utilities import read_csv

    details = {
        "name": "Portal 2",
        "release_date": {"date": "Apr 18, 2011"},
        "developers": ["Valve"],
        "publishers": ["Valve"],
        "platforms": {"windows": True, "mac": True, "linux": True},
        "genres": [{"id": "1", "description": "Action"}],
        "categories": [{"id": 23, "description": "Steam Cloud"}],
        "achievements": {"total": 51},
    }
    steam = fake_steam(details=details, search_items=[{"id": 620, "name": "Portal 2"}], store_page="")

    inp = tmp_path / "input" / "Games.csv"
    inp.parent.mkdir()
    pd.DataFrame(
        [
            {"Name": "Portal 2", "Steam_AppID": "620", "Notes": "pinned"},
            {"Name": "Portal 2", "Steam_AppID": "", "Notes": "by name"},
        ]
    ).to_csv(inp, index=False)
    out = tmp_path / "output" / "Games_Steam.csv"

    failed = run_export(inp, out, steam.sources())
    df = read_csv(out)

    assert failed == 0
    assert list(df["Notes"]) == ["pinned", "by name"]
    assert list(df["Steam_AppID"]) == ["620", "620"]
    assert df.loc[0, "Steam_Name"] == "Portal 2"
    assert df.loc[0, "Steam_Achievements"] == "51"
    assert df.loc[0, "Steam_DeckCompatibility"] == "playable"
    assert df.loc[0, "Steam_Cloud"] == "true"
    assert df.loc[0, "Steam_Genres"] == '["Action"]'
    assert df.loc[0, "Steam_Platforms"] == "Windows, macOS, Linux"
    assert df.loc[0, "Steam_LookupError"] == ""
    # Only the unpinned row needed a search.
    assert steam.calls_to("search") == 1


def test_export_keeps_failed_rows(fake_steam):
    import pandas as pd

    from steam_game_lookup.errors import UpstreamError
    from steam_game_lookup.pipelines.export_pipeline import export_profiles

    df = pd.DataFrame([{"Name": "Nothing", "Steam_AppID": "1"}, {"Name": "", "Steam_AppID": ""}])

    out = export_profiles(df, fake_steam(details=None).sources())
    assert list(out["Steam_LookupError"]) == ["not_found", "not_found"]
    assert list(out["Steam_Name"]) == ["", ""]

    out = export_profiles(df.head(1), fake_steam(app_details_entry=UpstreamError("down")).sources())
    assert list(out["Steam_LookupError"]) == ["upstream_error"]


def test_failed_rows_clear_stale_profile_cells(fake_steam):
    import pandas as pd

    from steam_game_lookup.pipelines.export_pipeline import export_profiles
    from steam_game_lookup.schema import EXPORT_PROFILE_COLS

    previous = {c: "stale" for c in EXPORT_PROFILE_COLS}
    previous.update({"Name": "Delisted", "Steam_AppID": "42", "Steam_LookupError": ""})
    out = export_profiles(pd.DataFrame([previous]), fake_steam(details=None).sources())

    assert out.loc[0, "Steam_AppID"] == "42"
    assert out.loc[0, "Steam_LookupError"] == "not_found"
    for col in EXPORT_PROFILE_COLS:
        if col != "Steam_LookupError":
            assert out.loc[0, col] == "", col


def _recent_localized_game():
    return {
        "name": "Recent Game",
        "release_date": {"date": "Mar 3, 2020"},
        "supported_languages": "English, French, German, Spanish, Italian, Russian",
        "platforms": {"windows": True, "mac": False, "linux": False},
        "categories": [{"id": 2, "description": "Single-player"}],
    }


def test_export_cli_applies_config_overrides(tmp_path, monkeypatch, fake_steam):
    import pandas as pd

    from steam_game_lookup import cli
    from steam_game_lookup.utils.utilities import read_csv

    steam = fake_steam(details=_recent_localized_game(), store_page="")

    class _Client:
        def __init__(self, **kwargs):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return None

        def sources(self):
            return steam.sources()

        def format_stats(self):
            return ""

    monkeypatch.setattr(cli, "SteamClient", _Client)

    inp = tmp_path / "Games.csv"
    pd.DataFrame([{"Name": "Recent Game", "Steam_AppID": "1"}]).to_csv(inp, index=False)

    default_out = tmp_path / "default.csv"
    assert cli.main(["export", str(inp), "--out", str(default_out)]) == 0
    assert read_csv(default_out).loc[0, "Steam_Cloud"] == "true"

    cfg = tmp_path / "settings.yaml"
    cfg.write_text("heuristics:\n  cloud_release_rule_enabled: false\n", encoding="utf-8")
    out = tmp_path / "declared_only.csv"
    assert cli.main(["export", str(inp), "--out", str(out), "--config", str(cfg)]) == 0
    assert read_csv(out).loc[0, "Steam_Cloud"] == "false"
