from .params_store import RedisParamsStore, KeyValueProtocol
