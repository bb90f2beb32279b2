from .filter import InclusionPolicyProtocol
from .fs import PathResolverProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol
from .render import AnnotatorProtocol, LineMapperProtocol, OutputSinkProtocol
from .templating import TemplateEngineProtocol

__all__ = [
    'AnnotatorProtocol',
    'InclusionPolicyProtocol',
    'LineMapperProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
    'OutputSinkProtocol',
    'PathResolverProtocol',
    'TemplateEngineProtocol',
]
