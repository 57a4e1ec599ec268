import json


def write_json(command, payload):
    command.stdout.write(json.dumps(payload, indent=2, default=str))
