def transform(record):
    record["imported"] = True
    if record.get("Status") == "":
        record["raw_status_seen"] = True
