"""One-time provisioning of a data stream.

Order: lifecycle policy, index template, existence check, stream creation.
The existence check only saves a round trip on the common already-created
path; a concurrent creator is handled by accepting the cluster's
"already exists" answer from the create call.
"""
import copy
from typing import Any, Callable, Dict, Optional

from data_stream_name import validate_data_stream_name
from datastream_errors import (
    CheckFailed,
    ClusterConflict,
    ClusterError,
    CreateFailed,
    UnsupportedCluster,
)
from logger_setup import get_logger

logger = get_logger("es_datastream.bootstrap")

# Data streams arrived in 7.9.
MINIMUM_ES_MAJOR_VERSION = 7

DEFAULT_ILM_POLICY: Dict[str, Any] = {
    "phases": {
        "hot": {
            "min_age": "0ms",
            "actions": {
                "rollover": {"max_age": "30d", "max_primary_shard_size": "50gb"},
                "set_priority": {"priority": 100},
            },
        },
        "delete": {
            "min_age": "30d",
            "actions": {"delete": {}},
        },
    }
}


def default_policy_name(stream_name: str) -> str:
    return f"{stream_name}_policy"


def default_template_name(stream_name: str) -> str:
    return stream_name


class DataStreamBootstrapper:
    def __init__(
        self,
        client,
        version_detector: Callable[[], int],
        policy_name: Optional[str] = None,
        template_name: Optional[str] = None,
        policy: Optional[Dict[str, Any]] = None,
        minimum_major_version: int = MINIMUM_ES_MAJOR_VERSION,
    ):
        self.client = client
        self.version_detector = version_detector
        self.policy_name = policy_name
        self.template_name = template_name
        self.policy = policy
        self.minimum_major_version = minimum_major_version

    def ensure(self, name: str) -> None:
        """Make sure policy, template and stream exist for ``name``.

        Raises UnsupportedCluster before touching the cluster when it is too
        old, CheckFailed when the version or existence check errors, and CreateFailed
        when any put/create call errors with anything but "already exists".
        """
        name = validate_data_stream_name(name)
        try:
            detected = self.version_detector()
        except ClusterError as exc:
            raise CheckFailed(f"Could not detect cluster version for <{name}>: {exc}", name) from exc
        if detected < self.minimum_major_version:
            raise UnsupportedCluster(detected, self.minimum_major_version)

        policy_name = self.policy_name or default_policy_name(name)
        template_name = self.template_name or default_template_name(name)
        policy = copy.deepcopy(self.policy if self.policy is not None else DEFAULT_ILM_POLICY)

        try:
            self.client.put_lifecycle_policy(policy_name, policy)
        except ClusterError as exc:
            raise CreateFailed(f"Could not put lifecycle policy <{policy_name}>: {exc}", name) from exc

        try:
            self.client.put_index_template(template_name, f"{name}*", policy_name)
        except ClusterError as exc:
            raise CreateFailed(f"Could not put index template <{template_name}>: {exc}", name) from exc

        try:
            exists = self.client.data_stream_exists(name)
        except ClusterError as exc:
            raise CheckFailed(f"Could not check data stream <{name}>: {exc}", name) from exc
        if exists:
            logger.info("Data stream <%s> already exists, skipping creation", name)
            return

        logger.info("Data stream <%s> does not exist, creating it", name)
        try:
            self.client.put_data_stream(name)
        except ClusterConflict as exc:
            logger.info("Data stream <%s> was created concurrently: %s", name, exc)
        except ClusterError as exc:
            raise CreateFailed(f"Could not create data stream <{name}>: {exc}", name) from exc
