import logging
from datetime import timedelta

from couchbase.auth import PasswordAuthenticator
from couchbase.bucket import Bucket
from couchbase.cluster import Cluster
from couchbase.collection import Collection
from couchbase.diagnostics import ServiceType
from couchbase.options import ClusterOptions, WaitUntilReadyOptions

from .constants import MCP_SERVER_NAME

logger = logging.getLogger(f"{MCP_SERVER_NAME}.utils.connection")


def connect_to_couchbase_cluster(
    connection_string: str, username: str, password: str, ca_cert_path: str = None
) -> Cluster:
    """Connect to Couchbase cluster and return the cluster object if successful.
    A CA certificate path is optional, if None then local trust store is used.
    If the connection fails, it will raise an exception.
    """
    try:
        logger.info("Connecting to Couchbase cluster...")
        auth = PasswordAuthenticator(username, password, cert_path=ca_cert_path)
        options = ClusterOptions(auth)
        options.apply_profile("wan_development")
        cluster = Cluster(connection_string, options)  # type: ignore
        cluster.wait_until_ready(timedelta(seconds=5))

        logger.info("Successfully connected to Couchbase cluster")
        return cluster
    except Exception as e:
        logger.error(f"Failed to connect to Couchbase: {e}")
        raise


def connect_to_bucket(cluster: Cluster, bucket_name: str) -> Bucket:
    """Connect to a bucket and return the bucket object if successful.
    If the operation fails, it will raise an exception.
    """
    try:
        logger.info(f"Connecting to bucket: {bucket_name}")
        bucket = cluster.bucket(bucket_name)
        return bucket
    except Exception as e:
        logger.error(f"Failed to connect to bucket: {e}")
        raise


def connect_to_collection(
    cluster: Cluster, bucket_name: str, scope_name: str, collection_name: str
) -> Collection:
    """Open a collection that holds the catalog documents.

    Only the key-value service is used, so opening waits for that service to
    be ready on the bucket instead of the whole cluster.
    If the operation fails, it will raise an exception.
    """
    bucket = connect_to_bucket(cluster, bucket_name)
    try:
        cluster.wait_until_ready(
            timedelta(seconds=5),
            WaitUntilReadyOptions(service_types=[ServiceType.KeyValue]),
        )
        collection = bucket.scope(scope_name).collection(collection_name)
        logger.info(f"Using collection {bucket_name}.{scope_name}.{collection_name}")
        return collection
    except Exception as e:
        logger.error(f"Failed to open collection {bucket_name}.{scope_name}.{collection_name}: {e}")
        raise
