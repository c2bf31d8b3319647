import importlib

from flask import Flask

# the package re-exports the MongoDB instance under the same name
db_module = importlib.import_module("app.extensions.db")


def test_client_is_built_from_config_without_retry_overrides(monkeypatch):
    calls = []

    class RecordingClient(dict):
        def __init__(self, uri, **kwargs):
            super().__init__()
            calls.append((uri, kwargs))

        def __missing__(self, name):
            return {"name": name}

    monkeypatch.setattr(db_module, "MongoClient", RecordingClient)

    app = Flask(__name__)
    app.config.update(MONGO_URI="mongodb://db:27017/shop", DB_NAME="shop", MONGO_MAX_POOL_SIZE=4)

    mongo = db_module.MongoDB()
    mongo.init_app(app)

    (uri, kwargs), = calls
    assert uri == "mongodb://db:27017/shop"
    assert kwargs == {"maxPoolSize": 4, "serverSelectionTimeoutMS": 10000}
    assert "retryWrites" not in kwargs
    assert mongo.db == {"name": "shop"}
    assert app.mongo is mongo.db
