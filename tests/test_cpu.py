from soulcast.cpu import CPU, RAM_SIZE, Bus


def test_bus_starts_zeroed():
    bus = Bus()
    assert len(bus.ram) == RAM_SIZE
    assert not any(bus.ram)


def test_write_then_read():
    bus = Bus()
    bus.write(0xFFFF, 0x42)
    bus.write(0x0000, 0x17)
    assert bus.read(0xFFFF) == 0x42
    assert bus.read(0x0000, True) == 0x17


def test_out_of_range_addresses():
    bus = Bus()
    bus.write(0x10000, 0x99)
    assert bus.read(0x10000) == 0
    assert not any(bus.ram)


def test_clock_counts_cycles_and_leaves_bus_alone():
    bus = Bus()
    cpu = CPU(bus)
    cpu.clock()
    cpu.clock()
    assert cpu.cycles == 2
    assert cpu.bus is bus
    assert not any(bus.ram)