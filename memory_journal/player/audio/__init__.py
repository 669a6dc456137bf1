from memory_journal.player.audio.output import AudioOutput, PlaybackRejected, TrackLoadError, VirtualAudioOutput
from memory_journal.player.audio.session import AudioSession, MemoryPlayback, PlaybackMode, ResumeState
from memory_journal.player.audio.controller import AudioController
