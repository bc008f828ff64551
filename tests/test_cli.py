import pytest

from attestation_tracker import cli


def test_parser_commands():
    parser = cli.create_parser()

    args = parser.parse_args(["epoch", "indexes.txt", "1234"])
    assert (args.command, args.validator_index_file, args.epoch) == ("epoch", "indexes.txt", 1234)

    args = parser.parse_args(["survey", "indexes.txt"])
    assert (args.command, args.validator_index_file) == ("survey", "indexes.txt")

    args = parser.parse_args(["resolve", "pubkeys.txt"])
    assert (args.command, args.pubkey_file, args.output_file) == ("resolve", "pubkeys.txt", None)


def test_epoch_must_be_an_integer():
    with pytest.raises(SystemExit):
        cli.create_parser().parse_args(["epoch", "indexes.txt", "latest"])


@pytest.mark.asyncio
async def test_missing_input_file_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        await cli.main(["survey", str(tmp_path / "missing.txt")])


def test_entry_points_prefix_the_command(monkeypatch):
    seen = []

    async def fake_main(argv=None):
        seen.append(argv)

    monkeypatch.setattr(cli, "main", fake_main)
    monkeypatch.setattr(cli.sys, "argv", ["missed-late-attestations", "indexes.txt"])

    cli.survey_entry()

    assert seen == [["survey", "indexes.txt"]]
