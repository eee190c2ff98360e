"""
Error taxonomy for platecraft

Every failure raised by the capture, embed, tag and asset helpers derives
from PlatecraftError and belongs to one of four kinds:

    SequencingError     - operations called out of order (nested embed,
                          unmatched stop/close, mismatched closing tag)
    NamingError         - empty or malformed names and tokens
    TemplateLookupError - a name that does not resolve (folder, transform,
                          template, function)
    ResourceError       - a required file is missing

Sequencing and naming errors are template authoring bugs and abort the
render immediately. ResourceError is only raised when debug mode asks
for it; otherwise missing assets degrade to un-busted paths.
"""


class PlatecraftError(Exception):
    """Base class for all platecraft errors"""
    pass


# Sequencing

class SequencingError(PlatecraftError):
    """Raised when an operation is called in an illegal order"""
    pass


class AlreadyActive(SequencingError):
    """Raised when starting an output buffer that is already capturing"""
    pass


class NotActive(SequencingError):
    """Raised when stopping an output buffer that is not capturing"""
    pass


class BufferOrderError(SequencingError):
    """Raised when an output buffer is released while an inner buffer is still open"""
    pass


class AlreadyStopped(SequencingError):
    """Raised when stopping a capture twice"""
    pass


class NotStopped(SequencingError):
    """Raised when reading a capture before it is stopped"""
    pass


class NestedEmbed(SequencingError):
    """Raised when an embed is started while another one is open"""
    pass


class NoActiveEmbed(SequencingError):
    """Raised when an embed operation is called with no embed open"""
    pass


class NestedBlock(SequencingError):
    """Raised when a block is started while another block is capturing"""
    pass


class NoActiveBlock(SequencingError):
    """Raised when stopping a block that was never started"""
    pass


class BlockInProgress(SequencingError):
    """Raised when an operation needs the embed idle but a block is capturing"""
    pass


class UnbalancedClose(SequencingError):
    """Raised when closing a conditional tag with nothing open"""
    pass


class TagMismatch(SequencingError):
    """Raised when a closing conditional tag does not match the last opened one"""
    pass


class TagCapacityExceeded(SequencingError):
    """Raised when opening a conditional tag on a full matcher"""
    pass


class NoActiveRender(SequencingError):
    """Raised when ambient output is needed outside of a render pass"""
    pass


# Naming

class NamingError(PlatecraftError):
    """Raised when a name or token is empty or malformed"""
    pass


class MissingBlockName(NamingError):
    """Raised when a block is started without a binding key"""
    pass


class MalformedToken(NamingError):
    """Raised when a folder::file token does not split into exactly two parts"""
    pass


class MalformedFolderDefinition(NamingError):
    """Raised when a folder definition line has no name::path delimiter"""
    pass


# Lookup

class TemplateLookupError(PlatecraftError, LookupError):
    """Raised when a name does not resolve against its registry"""
    pass


class UnknownFolder(TemplateLookupError):
    """Raised in strict mode for an asset folder that is not configured"""
    pass


class UnknownTransform(TemplateLookupError):
    """Raised when a pipeline names a transform that is not registered"""
    pass


class UnknownTemplate(TemplateLookupError):
    """Raised when rendering a template name that is not registered"""
    pass


class UnknownFunction(TemplateLookupError, AttributeError):
    """Raised when a template calls a function that is not registered"""
    pass


class UnknownOperation(TemplateLookupError):
    """Raised when embed dispatch receives a name it cannot handle"""
    pass


class UnsupportedAssetType(TemplateLookupError):
    """Raised when an asset's file kind has no markup for the requested operation"""
    pass


# Resources

class ResourceError(PlatecraftError):
    """Raised when a required file cannot be found"""
    pass


class MissingAsset(ResourceError):
    """Raised in debug mode when an asset file does not exist"""
    pass
