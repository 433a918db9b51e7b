from linkshortener.models.link_model import LinkModel, LinkStatisticsModel, LinkStatus


__all__ = [
    'LinkModel',
    'LinkStatisticsModel',
    'LinkStatus',
]
