"""Output that ships buffered records into an Elasticsearch data stream.

Lifecycle: ``configure(conf)`` validates the settings without touching the
cluster, ``start()`` provisions the stream once, and each ``write(chunk)``
sends the chunk as a single ``_bulk`` request of ``create`` actions.
"""
from collections.abc import Mapping
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import bulk_encoder
from config_loader import validate_config
from data_stream_bootstrap import DataStreamBootstrapper
from datastream_errors import ConfigError
from es_client import (
    MINIMUM_CLIENT_VERSION,
    DataStreamClient,
    client_library_version,
    detect_es_major_version,
    get_es_client,
)
from logger_setup import get_logger

logger = get_logger("es_datastream.output")

REQUIRED_CLIENT_MESSAGE = "Elasticsearch {} or later is needed.".format(
    ".".join(str(p) for p in MINIMUM_CLIENT_VERSION)
)


def format_time(time, precision: int) -> str:
    """ISO-8601 UTC timestamp with ``precision`` fractional digits."""
    if isinstance(time, datetime):
        dt = time if time.tzinfo else time.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
    else:
        dt = datetime.fromtimestamp(float(time), tz=timezone.utc)
    text = dt.strftime('%Y-%m-%dT%H:%M:%S')
    if precision > 0:
        fraction = f"{dt.microsecond:06d}000"
        text += "." + fraction[:precision]
    return text + "+00:00"


class ElasticsearchDataStreamOutput:
    def __init__(
        self,
        client: Optional[DataStreamClient] = None,
        es=None,
        version_detector: Optional[Callable[[], int]] = None,
        error_handler: Optional[Callable[[Any, Any, Exception], None]] = None,
    ):
        self.client = client
        self.es = es
        self.version_detector = version_detector
        self.error_handler = error_handler or self._log_rejected
        self.config: Optional[SimpleNamespace] = None
        self._started = False

    @property
    def data_stream_name(self) -> Optional[str]:
        return self.config.data_stream_name if self.config is not None else None

    def configure(self, conf):
        if isinstance(conf, Mapping):
            cfg = SimpleNamespace(**conf)
        else:
            cfg = SimpleNamespace(**vars(conf))
        validate_config(cfg)
        if client_library_version() < MINIMUM_CLIENT_VERSION:
            raise ConfigError(REQUIRED_CLIENT_MESSAGE)
        self.config = cfg
        return self

    def start(self):
        if self.config is None:
            raise RuntimeError("configure() must be called before start()")
        if self._started:
            return
        if self.client is None:
            if self.es is None:
                self.es = get_es_client(self.config.es_url)
            self.client = DataStreamClient(self.es)
        detector = self.version_detector or (
            lambda: detect_es_major_version(self.client.es, self.client.classifier)
        )
        bootstrapper = DataStreamBootstrapper(
            self.client,
            detector,
            policy_name=self.config.data_stream_ilm_name,
            template_name=self.config.data_stream_template_name,
            policy=self.config.data_stream_ilm_policy,
        )
        bootstrapper.ensure(self.config.data_stream_name)
        self._started = True
        logger.info("Data stream output ready for <%s>", self.config.data_stream_name)

    def format(self, time, record) -> Optional[Dict[str, Any]]:
        """Return the document to ship for ``record``, or None if it cannot be shipped."""
        if not isinstance(record, dict):
            return None
        key = self.config.timestamp_key
        if key in record:
            return record
        doc = dict(record)
        doc[key] = format_time(time, self.config.time_precision)
        return doc

    def write(self, chunk: Iterable[Tuple[Any, Any]]) -> List[Dict[str, Any]]:
        """Ship ``chunk`` in one bulk request and return the items the cluster rejected."""
        if not self._started:
            raise RuntimeError("start() must be called before write()")
        name = self.config.data_stream_name
        accepted = []
        for time, record in chunk:
            doc = self.format(time, record)
            if doc is None:
                self.error_handler(time, record, TypeError(f"record is not a hash: {record!r}"))
                continue
            try:
                # encode alone so one bad document does not sink the batch
                bulk_encoder.encode([(time, doc)]).to_ndjson()
            except (TypeError, ValueError) as exc:
                self.error_handler(time, record, exc)
                continue
            accepted.append((time, doc))

        body = bulk_encoder.encode(accepted)
        if not body:
            return []
        response = self.client.bulk_write(name, body)
        failed = failed_items(response)
        if failed:
            logger.error("Could not bulk insert %d of %d records to data stream %s: %s",
                         len(failed), len(body), name, failed)
        elif response and response.get("errors"):
            logger.error("Could not bulk insert to data stream %s: %s", name, response)
        else:
            logger.debug("Bulk inserted %d records to data stream %s", len(body), name)
        return failed

    @staticmethod
    def _log_rejected(time, record, exc):
        logger.warning("Dropping record at %s: %s", time, exc)


def failed_items(response) -> List[Dict[str, Any]]:
    if not response or not response.get("errors"):
        return []
    failed = []
    for item in response.get("items", []):
        for result in item.values():
            if isinstance(result, dict) and "error" in result:
                failed.append(result)
    return failed
