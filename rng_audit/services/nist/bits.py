import numpy as np

from rng_audit.core.exceptions import PreconditionViolation

BinaryInput = str | bytes | bytearray | list[int] | np.ndarray


def bytes_to_bits(data: bytes | bytearray) -> np.ndarray:
    """
    Unpack a byte buffer into a read-only array of bits, most significant bit first

    Args:
        data: Bytes to unpack

    Returns:
        numpy.ndarray: uint8 array of length 8 * len(data)
    """
    bits = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
    bits.flags.writeable = False
    return bits


def bits_to_bytes(bits: list[int] | np.ndarray) -> bytes:
    """Pack bits back into bytes, most significant bit first"""
    array = np.asarray(bits)
    if array.ndim != 1:
        raise PreconditionViolation('Bit sequence must be one-dimensional')
    if len(array) % 8 != 0:
        raise PreconditionViolation(f'Bit sequence length {len(array)} is not a multiple of 8')
    if len(array) and not np.isin(array, (0, 1)).all():
        raise PreconditionViolation('Bit sequence contains values other than 0 and 1')
    return np.packbits(array.astype(np.uint8)).tobytes()


def to_bits(input_data: BinaryInput) -> np.ndarray:
    """
    Convert various input formats to a numpy array of 0s and 1s

    Args:
        input_data: Input sequence in various formats
                   - Binary string ("01001")
                   - Bytes object, unpacked MSB first
                   - List of integers ([0,1,0,0,1])
                   - Numpy array

    Returns:
        numpy.ndarray: uint8 array of 0s and 1s
    """
    if isinstance(input_data, (bytes, bytearray)):
        return bytes_to_bits(input_data)

    if isinstance(input_data, str):
        text = input_data.strip()
        if text.strip('01'):
            raise PreconditionViolation('Binary string may only contain the characters 0 and 1')
        return np.frombuffer(text.encode('ascii'), dtype=np.uint8) - ord('0')

    if isinstance(input_data, (list, np.ndarray)):
        array = np.asarray(input_data)
        if array.ndim != 1:
            raise PreconditionViolation('Bit sequence must be one-dimensional')
        if len(array) and not np.isin(array, (0, 1)).all():
            raise PreconditionViolation('Bit sequence contains values other than 0 and 1')
        return array.astype(np.uint8)

    raise PreconditionViolation(f'Unsupported input format: {type(input_data).__name__}')
