from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Метрики для HTTP запросов
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Метрики для хранилища
db_queries_total = Counter(
    'db_queries_total',
    'Total document store operations',
    ['collection', 'operation']
)

# Запросы, которые не распознал диспетчер
unmatched_queries_total = Counter('unmatched_queries_total', 'Total unmatched pseudo-SQL queries')

def metrics_endpoint():
    """Endpoint для Prometheus метрик"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
