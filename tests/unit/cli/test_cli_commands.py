"""
Tests for the qcbuddy command line.

Test Strategy
-------------
- typer CliRunner against the real app
- Runs from temp_dir with generation env vars cleared
- --offline / --knowledge keep every command local
"""

import pytest
from typer.testing import CliRunner

from qcbuddy import __version__
from qcbuddy.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch, temp_dir):
    for name in ("GEMINI_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "GEMINI_MODE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_dir)


@pytest.mark.unit
class TestMain:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "ask" in result.output


@pytest.mark.unit
class TestIngestCommand:
    def test_ingest(self, temp_dir, docx_file):
        raw = temp_dir / "raw"
        raw.mkdir()
        docx_file(
            "Image_Guide.docx",
            [("Heading 1", "Hero"), (None, "Hero images must be 1125x780 pixels.")],
        ).rename(raw / "Image_Guide.docx")

        result = runner.invoke(app, ["ingest", str(raw), "--out", str(temp_dir / "out")])

        assert result.exit_code == 0, result.output
        assert "images_sop.json" in result.output
        assert (temp_dir / "out" / "images_sop.json").exists()

    def test_empty_raw_dir(self, temp_dir):
        (temp_dir / "raw").mkdir()
        result = runner.invoke(app, ["ingest", str(temp_dir / "raw")])
        assert result.exit_code == 0
        assert "No documents found" in result.output

    def test_bad_mode(self, temp_dir):
        result = runner.invoke(app, ["ingest", str(temp_dir), "--mode", "huge"])
        assert result.exit_code == 1
        assert "QC-VAL-000" in result.output


@pytest.mark.unit
class TestAskCommand:
    def test_offline_answer(self, knowledge_dir):
        result = runner.invoke(
            app,
            ["ask", "What size should hero images be?", "--offline", "--knowledge", str(knowledge_dir)],
        )
        assert result.exit_code == 0, result.output
        assert "1125x780" in result.output
        assert "mood: happy" in result.output

    def test_sources_table(self, knowledge_dir):
        result = runner.invoke(
            app,
            ["ask", "hero images", "--offline", "-s", "--knowledge", str(knowledge_dir)],
        )
        assert "Sources" in result.output

    def test_empty_knowledge(self, temp_dir):
        empty = temp_dir / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["ask", "hero images", "--knowledge", str(empty)])
        assert result.exit_code == 0
        assert "SOP" in result.output
        assert "mood: confused" in result.output


@pytest.mark.unit
class TestKnowledgeCommand:
    def test_stats(self, knowledge_dir):
        result = runner.invoke(app, ["knowledge", "--knowledge", str(knowledge_dir)])
        assert result.exit_code == 0
        assert "Chunks per topic" in result.output
        assert "4 chunks loaded" in result.output
        assert "Glossary entries" in result.output

    def test_nothing_loaded(self, temp_dir):
        result = runner.invoke(app, ["knowledge", "--knowledge", str(temp_dir / "missing")])
        assert result.exit_code == 0
        assert "No knowledge loaded" in result.output


@pytest.mark.unit
class TestSuggestTagsCommand:
    def test_suggest(self, knowledge_dir):
        result = runner.invoke(
            app,
            [
                "suggest-tags",
                "Chicken Shawarma Wrap",
                "Falafel Sandwich",
                "Hummus",
                "--market",
                "JO",
                "--knowledge",
                str(knowledge_dir),
            ],
        )
        assert result.exit_code == 0
        assert "Cuisine tags: Middle Eastern, Sandwiches, Chicken" in result.output
        assert "Jordan" in result.output

    def test_no_signals(self, knowledge_dir):
        result = runner.invoke(app, ["suggest-tags", "Water", "--knowledge", str(knowledge_dir)])
        assert "No cuisine signals" in result.output
