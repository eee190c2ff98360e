"""
Embed sessions

An embed defers rendering a named template until the data it needs has
been assembled further down the calling template:

    t.embed("components::card", {"title": "Hi"})
    t.startBlock("footer")
    t.echo("<small>ok</small>")
    t.stopBlock()
    t.endEmbed()   # renders components::card with title and footer

Blocks capture ambient output into a template variable; blockValue()
binds a value directly. Only one embed may be open per render pass and
only one block per embed: ambient output has a single innermost
destination, so a nested embed could not tell which buffer its writes
belong to.

Every operation first consults models.state.EMBED_TRANSITIONS, which
holds the whole legal-transition table.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from ..config import appsettings, AppSettings
from ..models.state import BlockFrame, EmbedOperation, EmbedState, EMBED_TRANSITIONS
from .errors import MissingBlockName, NoActiveBlock, NoActiveEmbed, UnknownOperation
from .log import LOG
from .output import Output

Inserter = Callable[[str, Dict[str, Any]], None]


class EmbedSession:
    """
    Embed state machine of one render pass

    Attributes:
        state: Current EmbedState
        templateName: Template rendered when the embed ends, None when closed
        boundData: Data handed to the template when the embed ends
        block: Block currently capturing, None otherwise
    """

    def __init__(
        self,
        output: Output,
        insert: Inserter,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Args:
            output: Ambient output blocks capture from
            insert: Host entry point that renders a named template with data
                    and writes the result to the ambient output
            settings: Settings providing the template name delimiter
        """
        self.output = output
        self.insert = insert
        self.settings = settings or appsettings
        self.state = EmbedState.CLOSED
        self.templateName: Optional[str] = None
        self.boundData: Dict[str, Any] = {}
        self.block: Optional[BlockFrame] = None

        self.operations: Dict[str, Callable[..., Any]] = {
            'embed': self.embed_begin,
            'startEmbed': self.embed_begin,
            'stopEmbed': self.embed_end,
            'endEmbed': self.embed_end,
            'blockValue': self.value_bind,
            'to': self.value_bind,
            'startBlock': self.block_start,
            'stopBlock': self.block_stop,
            'endBlock': self.block_stop,
        }

    @property
    def activeBlockName(self) -> Optional[str]:
        return self.block.bindingKey if self.block else None

    def transition(self, operation: EmbedOperation) -> EmbedState:
        """
        Look up where an operation leads from the current state

        Raises:
            SequencingError: The error class the table holds for an illegal call
        """
        outcome = EMBED_TRANSITIONS[(self.state, operation)]
        if isinstance(outcome, EmbedState):
            return outcome

        messages = {
            EmbedOperation.BEGIN: f"You cannot nest embeds ('{self.templateName}' is still open)",
            EmbedOperation.BIND: "You must start an embed, outside of any block, before binding a value",
            EmbedOperation.BLOCK_START: "You must start an embed before starting a block, and blocks cannot be nested",
            EmbedOperation.BLOCK_STOP: "A block must be started inside an embed before it can be stopped",
            EmbedOperation.END: "An embed must be started, with no block capturing, before it can be ended",
        }
        raise outcome(f"{messages[operation]} [state: {self.state.value}]")

    def state_set(self, state: EmbedState) -> None:
        LOG(f"Embed state {self.state.value} -> {state.value}", level=3)
        self.state = state

    def embed_begin(self, name: str, data: Optional[Mapping[str, Any]] = None) -> None:
        """
        Open an embed of a named template

        Args:
            name: Template to render when the embed ends
            data: Initial data; copied, the caller's mapping is not modified

        Raises:
            NestedEmbed: If an embed is already open
        """
        next_state = self.transition(EmbedOperation.BEGIN)
        self.templateName = name
        self.boundData = dict(data or {})
        self.state_set(next_state)
        LOG(f"Embed of '{name}' started", level=2)

    def value_bind(self, key: str, value: Any) -> None:
        """
        Bind a value directly to a template variable

        Raises:
            NoActiveEmbed: If no embed is open
            BlockInProgress: If a block is capturing
        """
        self.state_set(self.transition(EmbedOperation.BIND))
        self.boundData[key] = value

    def block_start(self, key: str) -> None:
        """
        Start capturing ambient output into a template variable

        The variable is bound to None until the block stops.

        Raises:
            NoActiveEmbed: If no embed is open
            NestedBlock: If a block is already capturing
            MissingBlockName: If key is empty
            AlreadyActive: If a capture is running
        """
        next_state = self.transition(EmbedOperation.BLOCK_START)
        if not key:
            raise MissingBlockName(
                "You must provide the name of a template variable when starting a block"
            )

        buffer = self.output.buffer_open(exclusive=True)
        self.boundData[key] = None
        self.block = BlockFrame(bindingKey=key, buffer=buffer)
        self.state_set(next_state)

    def block_stop(self) -> str:
        """
        Stop the current block and bind its captured markup

        Returns:
            The captured markup

        Raises:
            NoActiveEmbed: If no embed is open
            NoActiveBlock: If no block is capturing
            BufferOrderError: If a buffer opened inside the block is still active;
                              the block keeps capturing
        """
        next_state = self.transition(EmbedOperation.BLOCK_STOP)
        if self.block is None:
            raise NoActiveBlock("A block must be started inside an embed before it can be stopped")

        text = self.block.buffer.stop()
        self.boundData[self.block.bindingKey] = text
        self.block = None
        self.state_set(next_state)
        return text

    def embed_end(self) -> None:
        """
        Close the embed and hand the template and its data to the host

        The session is reset before the host renders, so the embedded
        template may itself open an embed.

        Raises:
            NoActiveEmbed: If no embed is open
            BlockInProgress: If a block is still capturing
        """
        next_state = self.transition(EmbedOperation.END)
        if self.templateName is None:
            raise NoActiveEmbed("An embed must be started before it can be ended")

        name, data = self.templateName, self.boundData
        self.templateName = None
        self.boundData = {}
        self.state_set(next_state)

        LOG(f"Embed of '{name}' ended with {sorted(data)}", level=2)
        self.insert(name, data)

    def dispatch(self, method: Optional[str] = None, *args: Any) -> 'EmbedSession':
        """
        Call an operation by name, or open an embed of a template name

        Args:
            method: Operation name (e.g., "startBlock") or template name
                    containing the folder delimiter (e.g., "components::card");
                    None returns the session untouched
            *args: Arguments for the operation

        Returns:
            This session, for chaining in templates

        Raises:
            UnknownOperation: If method is neither an operation nor a template name
        """
        if method is None:
            return self

        operation = self.operations.get(method)
        if operation is not None:
            operation(*args)
        elif self.settings.templateName_is(method):
            self.embed_begin(method, *args)
        else:
            raise UnknownOperation(
                f"'{method}' is not an embed operation or template name. "
                f"Operations: {', '.join(sorted(self.operations))}"
            )
        return self

