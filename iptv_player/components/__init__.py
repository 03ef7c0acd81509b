# Components package
from .entry_list import EntryList
from .video_player import VideoPlayerComponent, attach_flet_video
