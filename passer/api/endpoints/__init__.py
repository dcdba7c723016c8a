from passer.api.endpoints.secrets import fetch_secret, store_secret

__all__ = ["fetch_secret", "store_secret"]
