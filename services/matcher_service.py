# 📦 /services/matcher_service.py

from prometheus_client import Counter

from engine.matcher import Matcher, DEFAULT_TOP_N

REQUEST_COUNTER = Counter("coachmatch_requests_total", "Total /match requests made")
MATCHES_RETURNED_COUNTER = Counter("coachmatch_matches_returned", "Number of matches returned per request")
EMPTY_RESULT_COUNTER = Counter("coachmatch_empty_results", "Requests with no eligible providers")


async def run_matcher(preferences, providers, top_n=DEFAULT_TOP_N, weights=None, geography=None):
    matcher = Matcher(preferences, providers, weights=weights, geography=geography)
    matches = matcher.run(top_n=top_n)

    if matches:
        MATCHES_RETURNED_COUNTER.inc(len(matches))
    else:
        EMPTY_RESULT_COUNTER.inc()
    return matches

async def run_explanation(preferences, providers, weights=None, geography=None):
    matcher = Matcher(preferences, providers, weights=weights, geography=geography)
    matches = matcher.run(top_n=1)

    if not matches:
        return None

    return matches[0]
