from prometheus_client import Counter, Gauge, Histogram

upload_poll_duration_seconds = Histogram('upload_poll_duration_seconds', 'Duration of an upload check cycle')
upload_poll_errors_total = Counter('upload_poll_errors_total', 'Number of upload checks that yielded no video id')
last_upload_poll_timestamp = Gauge('last_upload_poll_timestamp', 'Unix timestamp of last successful upload check')

live_connect_attempts_total = Counter('live_connect_attempts_total', 'Number of TikTok live connection attempts')
live_connect_failures_total = Counter('live_connect_failures_total', 'Number of failed TikTok live connection attempts')
live_connected = Gauge('live_connected', 'Whether the live room connection is believed up (0/1)')
live_signals_total = Counter('live_signals_total', 'Live signals received from the push connection', ['signal'])

notifications_sent_total = Counter('notifications_sent_total', 'Notifications delivered to Discord', ['kind'])
notification_failures_total = Counter('notification_failures_total', 'Notifications that could not be delivered', ['kind'])
