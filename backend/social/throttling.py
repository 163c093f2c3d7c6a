"""
Request rate limiting.

One budget per client: the authenticated user when there is one, the
client address otherwise. The default budget is 100 requests per 15
minutes, which DRF's stock rate parser cannot express ("15m"), so the
period may carry a multiplier.
"""
import re

from rest_framework.throttling import SimpleRateThrottle

PERIODS = {'s': 1, 'm': 60, 'h': 60 * 60, 'd': 24 * 60 * 60}
RATE_PERIOD = re.compile(r'^(\d*)([smhd])')


class ClientRateThrottle(SimpleRateThrottle):
    scope = 'client'

    def get_cache_key(self, request, view):
        user = request.user
        if user is not None and user.is_authenticated:
            ident = f'user-{user.pk}'
        else:
            ident = self.get_ident(request)
        return self.cache_format % {'scope': self.scope, 'ident': ident}

    def parse_rate(self, rate):
        """
        "100/15m" -> (100, 900); "1000/hour" -> (1000, 3600)
        """
        if rate is None:
            return (None, None)
        num, period = rate.split('/')
        match = RATE_PERIOD.match(period.strip())
        if match is None:
            raise ValueError(f"Invalid throttle rate: {rate}")
        multiplier = int(match.group(1) or 1)
        return (int(num), multiplier * PERIODS[match.group(2)])
