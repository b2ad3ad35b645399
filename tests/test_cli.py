# ContainerWatch - CLI tests
import json

import yaml

from containerwatch.cli import cmd_replay, main
from containerwatch.config import get_default_config


def _capture(tmp_path):
    path = tmp_path / "capture.jsonl"
    path.write_text(
        "\n".join([
            json.dumps({"Type": "container", "Action": "die", "id": "abcdef0123456789", "time": 1}),
            "{broken",
            json.dumps({"Type": "image", "Action": "pull", "id": "nginx:latest",
                        "Actor": {"Attributes": {"name": "nginx"}}}),
        ])
    )
    return path


def test_replay_prints_notifications(tmp_path, capsys):
    assert cmd_replay(get_default_config(), str(_capture(tmp_path)), "aa:bb", False) == 2
    blocks = [yaml.safe_load(b) for b in capsys.readouterr().out.strip().split("\n\n")]
    assert blocks[0]["name"] == "Container Died"
    assert blocks[0]["scope"] == "host.mac=aa:bb and container.id=abcdef012345"
    assert blocks[1]["name"] == "Image Pulled"
    assert blocks[1]["description"] == "Event: pull; Name: nginx"
    assert blocks[1]["scope"] == "host.mac=aa:bb and container.image=nginx:latest"


def test_replay_json_output_respects_filter(tmp_path, capsys):
    config = get_default_config()
    config["events"]["filter"] = {"image": "all"}
    assert cmd_replay(config, str(_capture(tmp_path)), None, True) == 1
    record = json.loads(capsys.readouterr().out)
    assert record["title"] == "Image Pulled"
    assert record["severity"] == "information"


def test_tables_command(capsys):
    main(["tables"])
    out = capsys.readouterr().out
    assert "oom" in out and "Out of Memory" in out and "warning" in out
