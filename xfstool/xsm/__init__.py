"""Words, memory, registers, exceptions and disk image of the XSM machine."""