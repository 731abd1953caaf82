"""Fixed architecture values for the CHIP-8 machine."""

# ═══════════════════════════════════════════════════════════════════════════════
# MACHINE
# ═══════════════════════════════════════════════════════════════════════════════

MEMORY_SIZE = 4096                      # 4KB RAM
MAX_ADDRESS = MEMORY_SIZE - 1           # 0xFFF
PROGRAM_START = 0x200                   # Programs load at 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START   # 3584 bytes
STACK_SIZE = 16                         # 16-level stack
NUM_REGISTERS = 16                      # V0-VF
VF = 0xF                                # Flag register
NUM_KEYS = 16                           # 16 hex keys

# CPU Timing
DEFAULT_CLOCK_HZ = 500                  # Instructions per second
TIMER_HZ = 60                           # Delay/Sound timer rate
NS_PER_SECOND = 1_000_000_000

# ═══════════════════════════════════════════════════════════════════════════════
# FONT
# ═══════════════════════════════════════════════════════════════════════════════

FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5

# CHIP-8 Font (4x5 pixels, stored as 5 bytes each)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# ═══════════════════════════════════════════════════════════════════════════════
# DISPLAY
# ═══════════════════════════════════════════════════════════════════════════════

DISPLAY_W, DISPLAY_H = 64, 32          # CHIP-8 native resolution
SCALE = 12                              # Display scale factor
GLOW_UPSCALE = 4                        # Internal upscale for glow blur
BLOOM_STRENGTH = 0.55                   # Glow intensity (0.0-1.0)
BLUR_RADIUS = 1                         # Box blur passes (0-3)
FRAME_HZ = 60

# Beep
BEEP_FREQUENCY = 440
BEEP_SECONDS = 0.1
SAMPLE_RATE = 44100

# Colors (RGB)
COLORS = {
    'bg_dark': (15, 15, 25),
    'fg_green': (0, 255, 128),
    'overlay': (0, 0, 0, 180),
}
