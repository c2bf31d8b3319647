from pymongo import MongoClient


class MongoDB:
    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app):
        uri = app.config["MONGO_URI"]
        db_name = app.config.get("DB_NAME", "electric_shop")

        # MongoClient connects lazily; the pool is the only shared resource
        self.client = MongoClient(
            uri,
            maxPoolSize=app.config.get("MONGO_MAX_POOL_SIZE", 10),
            serverSelectionTimeoutMS=app.config.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", 10000),
        )
        self.db = self.client[db_name]
        app.mongo = self.db

    def get_collection(self, name):
        if self.db is None:
            raise RuntimeError("MongoDB not initialized")
        return self.db[name]

# Export the instance
db = MongoDB()
