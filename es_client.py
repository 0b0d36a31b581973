import os
from typing import Any, Dict, Iterable, Optional, Tuple

import elasticsearch
from elasticsearch import ApiError, Elasticsearch, TransportError

from bulk_encoder import BulkRequestBody
from datastream_errors import (
    BulkWriteError,
    ClusterConflict,
    ClusterError,
    ClusterNotFound,
    ClusterRequestError,
)
from logger_setup import get_logger

logger = get_logger("es_datastream.client")

# First client release shipping the data stream APIs.
MINIMUM_CLIENT_VERSION = (7, 9, 0)


def get_es_client(url: Optional[str] = None) -> Elasticsearch:
    """Return an Elasticsearch client for ``url`` or $ES_URL.

    Security is disabled on a default local cluster; if you enable it,
    set ES_USERNAME and ES_PASSWORD in the environment and they are passed
    as basic_auth. ES_REQUEST_TIMEOUT (seconds) bounds every request.
    """
    url = url or os.getenv("ES_URL", "http://localhost:9200")
    kwargs: Dict[str, Any] = {}
    timeout = os.getenv("ES_REQUEST_TIMEOUT")
    if timeout:
        kwargs["request_timeout"] = float(timeout)
    user = os.getenv("ES_USERNAME")
    pwd = os.getenv("ES_PASSWORD")
    if user and pwd:
        kwargs["basic_auth"] = (user, pwd)
    return Elasticsearch(url, **kwargs)


def client_library_version() -> Tuple[int, ...]:
    return tuple(elasticsearch.VERSION[:3])


def detect_es_major_version(es: Elasticsearch, classifier: Optional["ErrorClassifier"] = None) -> int:
    """Ask the cluster for its version and return the major component.

    Request failures come back as ClusterError like every other cluster call.
    """
    try:
        info = es.info()
    except (ApiError, TransportError) as exc:
        raise (classifier or ErrorClassifier()).classify(exc, "get cluster info") from exc
    number = info["version"]["number"]
    return int(str(number).split(".")[0])


class ErrorClassifier:
    """Maps a failed cluster call onto NotFound / Conflict / Other.

    A 400 whose error type is ``resource_already_exists_exception`` is how
    Elasticsearch reports a duplicate data stream, so it counts as a conflict
    alongside plain 409s.
    """

    def __init__(
        self,
        not_found_statuses: Iterable[int] = (404,),
        conflict_statuses: Iterable[int] = (409,),
        conflict_error_types: Iterable[str] = ("resource_already_exists_exception",),
    ):
        self.not_found_statuses = frozenset(not_found_statuses)
        self.conflict_statuses = frozenset(conflict_statuses)
        self.conflict_error_types = frozenset(conflict_error_types)

    @staticmethod
    def status_of(exc: Exception) -> Optional[int]:
        status = getattr(exc, "status_code", None)
        return status if isinstance(status, int) else None

    @staticmethod
    def error_type_of(exc: Exception) -> Optional[str]:
        body = getattr(exc, "body", None)
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                return error.get("type")
            if isinstance(error, str):
                return error
        return None

    def classify(self, exc: Exception, what: str) -> ClusterError:
        status = self.status_of(exc)
        message = f"{what} failed: {exc}"
        if status in self.not_found_statuses:
            return ClusterNotFound(message, status)
        if status in self.conflict_statuses or self.error_type_of(exc) in self.conflict_error_types:
            return ClusterConflict(message, status)
        return ClusterRequestError(message, status)


class DataStreamClient:
    """The cluster calls needed to provision and feed one data stream."""

    def __init__(self, es: Elasticsearch, classifier: Optional[ErrorClassifier] = None):
        self.es = es
        self.classifier = classifier or ErrorClassifier()

    def _call(self, what: str, fn, **kwargs):
        logger.debug("%s %s", what, {k: v for k, v in kwargs.items() if k != "operations"})
        try:
            return fn(**kwargs)
        except (ApiError, TransportError) as exc:
            raise self.classifier.classify(exc, what) from exc

    def put_lifecycle_policy(self, name: str, policy: Dict[str, Any]):
        return self._call("put lifecycle policy", self.es.ilm.put_lifecycle, name=name, policy=policy)

    def put_index_template(self, name: str, pattern: str, policy_name: str):
        return self._call(
            "put index template",
            self.es.indices.put_index_template,
            name=name,
            index_patterns=[pattern],
            data_stream={},
            template={"settings": {"index.lifecycle.name": policy_name}},
        )

    def data_stream_exists(self, name: str) -> bool:
        try:
            self._call("get data stream", self.es.indices.get_data_stream, name=name)
        except ClusterNotFound:
            return False
        return True

    def put_data_stream(self, name: str):
        return self._call("create data stream", self.es.indices.create_data_stream, name=name)

    def bulk_write(self, stream_name: str, body: BulkRequestBody) -> Dict[str, Any]:
        try:
            resp = self._call("bulk", self.es.bulk, index=stream_name, operations=body.to_ndjson())
        except ClusterError as exc:
            raise BulkWriteError(f"Could not bulk insert to data stream {stream_name}: {exc}", exc.status) from exc
        return getattr(resp, "body", resp)
