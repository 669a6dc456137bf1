from memory_journal.player.intro.state import IntroState
from memory_journal.player.intro.scene import IntroScene
from memory_journal.player.intro.sequencer import IntroSequencer
from memory_journal.player.intro.view import IntroView, LoggingIntroView
