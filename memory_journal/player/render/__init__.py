from memory_journal.player.render.base import Renderer
from memory_journal.player.render.recording import RecordingRenderer
