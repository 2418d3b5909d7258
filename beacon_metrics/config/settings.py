from decouple import Csv
from decouple import config as decouple_config

from beacon_metrics.beacon.typings import MetricKind
from beacon_metrics.common.typings import Singleton

DEFAULT_METRICS_HOST = '127.0.0.1'
DEFAULT_METRICS_PORT = 9100
DEFAULT_METRICS_PREFIX = 'beacon_metrics'


# pylint: disable-next=too-many-instance-attributes
class Settings(metaclass=Singleton):
    beacon_endpoints: list[str]
    metrics: list[MetricKind]
    verbose: bool
    enable_metrics: bool
    metrics_host: str
    metrics_port: int
    metrics_prefix: str

    log_level: str
    log_format: str

    # pylint: disable-next=too-many-arguments
    def set(
        self,
        beacon_endpoints: str = '',
        metrics: list[MetricKind] | None = None,
        verbose: bool = False,
        enable_metrics: bool = False,
        metrics_host: str = DEFAULT_METRICS_HOST,
        metrics_port: int = DEFAULT_METRICS_PORT,
        metrics_prefix: str = DEFAULT_METRICS_PREFIX,
        log_level: str | None = None,
        log_format: str | None = None,
    ) -> None:
        self.beacon_endpoints = [
            node.strip() for node in beacon_endpoints.split(',') if node.strip()
        ]
        self.metrics = metrics if metrics is not None else list(MetricKind)
        self.verbose = verbose
        self.enable_metrics = enable_metrics
        self.metrics_host = metrics_host
        self.metrics_port = metrics_port
        self.metrics_prefix = metrics_prefix

        self.log_level = log_level or 'INFO'
        self.log_format = log_format or LOG_PLAIN


settings = Settings()

# beacon node requests
BEACON_REQUEST_TIMEOUT: int = decouple_config('BEACON_REQUEST_TIMEOUT', default=10, cast=int)
USER_AGENT: str = decouple_config('USER_AGENT', default='beacon-metrics')

# polling
POLL_INTERVAL: float = decouple_config('POLL_INTERVAL', default=1, cast=float)
ATTESTATION_POLL_TIMEOUT: float = decouple_config(
    'ATTESTATION_POLL_TIMEOUT', default=61, cast=float
)

# logging
LOG_PLAIN = 'plain'
LOG_JSON = 'json'
LOG_FORMATS = [LOG_PLAIN, LOG_JSON]
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_WHITELISTED_DOMAINS: list[str] = decouple_config(
    'LOG_WHITELISTED_DOMAINS', cast=Csv(), default='localhost,127.0.0.1'
)
